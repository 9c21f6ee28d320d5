"""
pipeline.py
===========
Fetch or read a quiz page, resolve its selectors, extract and save questions.
"""

from pathlib import Path

import logfire
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.theme import Theme

from quizcrawl.config import SelectorResolver, extract_domain
from quizcrawl.exceptions import FetchError, QuizCrawlError
from quizcrawl.extractor import QuestionExtractor
from quizcrawl.fetcher import PageFetcher
from quizcrawl.images import ImageResolver
from quizcrawl.models import Question, SelectorConfig
from quizcrawl.normalizer import text_content
from quizcrawl.storage import SelectorStorage

THEME = Theme(
    {
        'info': 'dim cyan',
        'warning': 'magenta',
        'danger': 'bold red',
        'success': 'bold green',
        'step': 'bold blue',
    }
)


class ExtractionPipeline:
    """Main pipeline for extracting quiz questions from pages and files."""

    def __init__(
        self,
        storage: SelectorStorage | None = None,
        fetcher: PageFetcher | None = None,
        image_resolver: ImageResolver | None = None,
        embed_images: bool = True,
        timeout: float = 30.0,
        console: Console | None = None,
    ):
        """Initialize the pipeline.

        Args:
            storage: Selector and output storage. Defaults to .quizcrawl/.
            fetcher: Page fetcher. Defaults to a PageFetcher with ``timeout``.
            image_resolver: Image collaborator. Defaults to HTTP downloads.
            embed_images: Whether images are downloaded and inlined. Defaults to True.
            timeout: Seconds allowed per page and per image. Defaults to 30.
            console: Rich console for output.

        """
        self.console = console or Console(theme=THEME)
        self.storage = storage or SelectorStorage()
        self._owns_fetcher = fetcher is None
        self.fetcher = fetcher or PageFetcher(timeout=timeout)
        self._owns_image_resolver = image_resolver is None
        if image_resolver is None:
            image_resolver = ImageResolver(timeout=timeout, embed=embed_images)
        self.extractor = QuestionExtractor(image_resolver)
        self.resolver = SelectorResolver(self.storage.load_registry())

    def process_url(
        self,
        url: str,
        config: SelectorConfig | None = None,
        output_format: str = 'json',
        save: bool = True,
    ) -> list[Question] | None:
        """Fetch a page and extract its questions.

        Args:
            url: Page address
            config: Selector override; the registry is used when omitted
            output_format: 'json' or 'markdown'. Defaults to 'json'.
            save: Whether to write the questions to the output directory

        Returns:
            Extracted questions, or None if the page could not be fetched.

        """
        with logfire.span('process_url', url=url):
            self.console.print(Panel(f'Processing: {url}', style='bold blue'))
            self.console.print('[step]Step 1: Fetching HTML...[/step]')

            try:
                result = self.fetcher.fetch(url)
            except FetchError as e:
                self.console.print(f'[danger]Fetch failed: {e.reason}[/danger]')
                logfire.error('Fetch error', url=url, error=str(e), status_code=e.status_code)
                return None

            self.console.print(
                f'[success]Fetched {len(result.html):,} characters of HTML ({result.fetch_time:.2f}s)[/success]'
            )
            # Relative references on a redirected page resolve against where it landed
            return self._extract_and_save(url, result.html, result.url or url, config, output_format, save)

    def process_file(
        self,
        path: str | Path,
        config: SelectorConfig | None = None,
        url: str | None = None,
        output_format: str = 'json',
        save: bool = True,
    ) -> list[Question]:
        """Extract questions from a saved HTML file.

        Args:
            path: Path to the HTML file
            config: Selector override
            url: Address the page was saved from, for registry lookup and images
            output_format: 'json' or 'markdown'. Defaults to 'json'.
            save: Whether to write the questions to the output directory

        Returns:
            Extracted questions.

        """
        path = Path(path)
        with logfire.span('process_file', path=str(path)):
            self.console.print(Panel(f'Processing: {path}', style='bold blue'))
            self.console.print('[step]Step 1: Reading HTML...[/step]')
            html = path.read_bytes()
            source = url or str(path)
            return self._extract_and_save(source, html, url, config, output_format, save)

    def process_sources(
        self,
        sources: list[str],
        config: SelectorConfig | None = None,
        output_format: str = 'json',
        save: bool = True,
    ) -> dict[str, list[str]]:
        """Process several URLs and/or file paths.

        Returns:
            Sources grouped under 'successful' and 'failed'.

        """
        results: dict[str, list[str]] = {'successful': [], 'failed': []}

        with logfire.span('process_sources', total=len(sources)):
            for idx, source in enumerate(sources, 1):
                self.console.print(f'\n[bold blue]Processing source {idx}/{len(sources)}[/bold blue]')

                try:
                    if source.startswith(('http://', 'https://')):
                        questions = self.process_url(source, config, output_format, save)
                    else:
                        questions = self.process_file(source, config, output_format=output_format, save=save)
                    results['successful' if questions is not None else 'failed'].append(source)
                except (QuizCrawlError, OSError) as e:
                    logfire.error('Error processing source', source=source, error=str(e))
                    self.console.print(f'[danger]Error processing {source}: {e}[/danger]')
                    results['failed'].append(source)

            logfire.info(
                'Processing complete',
                total=len(sources),
                successful=len(results['successful']),
                failed=len(results['failed']),
            )

        return results

    def show_questions(self, questions: list[Question]):
        """Print a table of extracted questions."""
        table = Table(title='Extracted Questions')
        table.add_column('#', style='cyan', justify='right')
        table.add_column('Question', style='white', max_width=60)
        table.add_column('Answers', justify='right')
        table.add_column('Correct', style='green')
        table.add_column('Explanation', justify='center')
        table.add_column('Image', justify='center')

        for question in questions:
            table.add_row(
                question.id,
                text_content(question.question_text)[:120],
                str(len(question.answers)),
                ', '.join(answer.label for answer in question.correct_answers) or '-',
                '✓' if question.explanation else '',
                '✓' if question.image else '',
            )

        self.console.print(table)

    def show_summary(self):
        """Show the selector configs available to the resolver."""
        table = Table(title='Selector Configurations')
        table.add_column('Domain', style='cyan')
        table.add_column('Container', style='green')
        table.add_column('Source')

        stored = set(self.storage.list_domains())
        for domain, config in sorted(self.resolver.registry.items()):
            table.add_row(domain, config.container, 'stored' if domain in stored else 'built-in')

        self.console.print(table)
        self.console.print(f'\n[success]Total domains: {len(self.resolver.registry)}[/success]')

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.close()

    def close(self):
        """Close the HTTP sessions of collaborators the pipeline created itself."""
        if self._owns_fetcher:
            self.fetcher.close()
        if self._owns_image_resolver:
            self.extractor.image_resolver.close()

    # ============================================================================
    # Private helper methods
    # ============================================================================

    @logfire.instrument('extract_and_save', extract_args=False)
    def _extract_and_save(
        self,
        source: str,
        html: str | bytes,
        base_url: str | None,
        config: SelectorConfig | None,
        output_format: str,
        save: bool,
    ) -> list[Question]:
        selectors = self.resolver.resolve(config, base_url)
        domain = extract_domain(base_url)
        if config is not None:
            origin = 'custom config'
        elif domain and domain in self.resolver.registry:
            origin = f'registry entry for {domain}'
        else:
            origin = 'default config'

        self.console.print(f'[step]Step 2: Extracting questions ({origin})...[/step]')
        with logfire.span('extract', source=source, container=selectors.container):
            questions = self.extractor.extract(html, selectors, base_url=base_url)

        if questions:
            self.console.print(f'[success]Extracted {len(questions)} questions[/success]')
        else:
            self.console.print(f'[warning]No questions matched "{selectors.container}"[/warning]')

        if save:
            self.console.print('[step]Step 3: Saving questions...[/step]')
            filepath = self.storage.save_questions(source, questions, output_format)
            self.console.print(f'[success]✓ Saved questions to: {filepath}[/success]')

        return questions
