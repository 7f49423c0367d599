"""Code-block language table and the highlighter registry.

The registry is owned by the caller and handed to the renderer. Rendering
only ever calls :meth:`LanguageRegistry.resolve`, a synchronous lookup that
may report "unavailable"; loading additional lexers is a separate async step
(:meth:`LanguageRegistry.ensure_loaded`) driven from outside before a render
is requested.
"""

import asyncio
from dataclasses import dataclass
from typing import Callable, Dict, Iterable, List, Optional, Tuple

from loguru import logger
from pygments import highlight
from pygments.formatters import HtmlFormatter
from pygments.lexer import Lexer
from pygments.lexers import get_lexer_by_name
from pygments.util import ClassNotFound

HighlightFn = Callable[[str], str]


@dataclass(frozen=True)
class LanguageInfo:
    id: str
    name: str
    aliases: Tuple[str, ...] = ()
    # Pygments lexer alias when it differs from ``id``
    lexer: Optional[str] = None

    @property
    def lexer_name(self) -> str:
        return self.lexer or self.id


CORE_LANGUAGES: Tuple[LanguageInfo, ...] = (
    LanguageInfo("javascript", "JavaScript", ("js",)),
    LanguageInfo("typescript", "TypeScript", ("ts",)),
    LanguageInfo("python", "Python", ("py",)),
    LanguageInfo("json", "JSON"),
    LanguageInfo("bash", "Bash", ("sh", "shell")),
    LanguageInfo("css", "CSS"),
    LanguageInfo("markdown", "Markdown", ("md",)),
)

ADDITIONAL_LANGUAGES: Tuple[LanguageInfo, ...] = (
    LanguageInfo("c", "C"),
    LanguageInfo("cpp", "C++", ("c++",)),
    LanguageInfo("csharp", "C#", ("cs", "c#")),
    LanguageInfo("java", "Java"),
    LanguageInfo("go", "Go", ("golang",)),
    LanguageInfo("rust", "Rust", ("rs",)),
    LanguageInfo("ruby", "Ruby", ("rb",)),
    LanguageInfo("php", "PHP"),
    LanguageInfo("swift", "Swift"),
    LanguageInfo("kotlin", "Kotlin", ("kt",)),
    LanguageInfo("sql", "SQL"),
    LanguageInfo("yaml", "YAML", ("yml",)),
    LanguageInfo("xml", "XML", ("html", "svg")),
    LanguageInfo("jsx", "JSX", ("react",)),
    LanguageInfo("tsx", "TSX", lexer="jsx"),
    LanguageInfo("scss", "SCSS", ("sass",)),
    LanguageInfo("diff", "Diff", ("patch",)),
    LanguageInfo("docker", "Dockerfile", ("dockerfile",)),
    LanguageInfo("graphql", "GraphQL", ("gql",)),
    LanguageInfo("lua", "Lua"),
    LanguageInfo("perl", "Perl", ("pl",)),
    LanguageInfo("powershell", "PowerShell", ("ps1", "ps")),
    LanguageInfo("r", "R", lexer="splus"),
    LanguageInfo("scala", "Scala"),
    LanguageInfo("toml", "TOML"),
    LanguageInfo("ini", "INI"),
)

ALL_LANGUAGES: Tuple[LanguageInfo, ...] = CORE_LANGUAGES + ADDITIONAL_LANGUAGES

_BY_ID: Dict[str, LanguageInfo] = {lang.id: lang for lang in ALL_LANGUAGES}
_BY_ALIAS: Dict[str, LanguageInfo] = {
    alias: lang for lang in ALL_LANGUAGES for alias in lang.aliases
}

_POPULAR_IDS = (
    "javascript",
    "typescript",
    "python",
    "json",
    "bash",
    "css",
    "java",
    "csharp",
    "go",
    "rust",
    "sql",
    "yaml",
)


def resolve_language_alias(value: str) -> str:
    """Map a fence tag or alias to its canonical id; unknown names pass through lowercased."""
    lower = value.strip().lower()
    if lower in _BY_ID:
        return lower
    lang = _BY_ALIAS.get(lower)
    if lang:
        return lang.id
    return lower


def get_language_info(value: str) -> Optional[LanguageInfo]:
    return _BY_ID.get(resolve_language_alias(value))


def get_popular_languages() -> List[LanguageInfo]:
    return [_BY_ID[lang_id] for lang_id in _POPULAR_IDS]


class LanguageRegistry:
    """Caller-owned set of loaded lexers, used as the renderer's highlighter capability."""

    def __init__(
        self,
        languages: Iterable[LanguageInfo] = ALL_LANGUAGES,
        *,
        preload_core: bool = True,
    ):
        self._languages: Dict[str, LanguageInfo] = {lang.id: lang for lang in languages}
        self._lexers: Dict[str, Lexer] = {}
        self._formatter = HtmlFormatter(nowrap=True)
        if preload_core:
            for lang in CORE_LANGUAGES:
                if lang.id in self._languages:
                    self.load(lang.id)

    def is_loaded(self, language_id: str) -> bool:
        return resolve_language_alias(language_id) in self._lexers

    def load(self, language_id: str) -> bool:
        """Load the lexer for ``language_id``. Returns False for unknown or unavailable languages."""
        resolved = resolve_language_alias(language_id)
        if resolved in self._lexers:
            return True

        info = self._languages.get(resolved)
        if info is None:
            logger.warning(f"Unknown language: {language_id}")
            return False

        try:
            lexer = get_lexer_by_name(info.lexer_name, stripnl=False)
        except ClassNotFound:
            logger.warning(f"Failed to load language: {resolved}")
            return False

        self._lexers[resolved] = lexer
        logger.debug(f"Loaded language: {resolved}")
        return True

    async def ensure_loaded(self, language_id: str) -> bool:
        """Load ``language_id`` off the event loop; safe to call repeatedly."""
        if self.is_loaded(language_id):
            return True
        return await asyncio.to_thread(self.load, language_id)

    async def preload(self, language_ids: Iterable[str]) -> List[bool]:
        return list(
            await asyncio.gather(*(self.ensure_loaded(lang) for lang in language_ids))
        )

    def resolve(self, language_id: str) -> Optional[HighlightFn]:
        """Return a highlight function for ``language_id``, or None when it is not loaded."""
        lexer = self._lexers.get(resolve_language_alias(language_id))
        if lexer is None:
            return None

        def _highlight(code: str) -> str:
            return highlight(code, lexer, self._formatter)

        return _highlight

    def available(self) -> List[Tuple[LanguageInfo, bool]]:
        return [(lang, lang.id in self._lexers) for lang in self._languages.values()]


__all__ = [
    "HighlightFn",
    "LanguageInfo",
    "CORE_LANGUAGES",
    "ADDITIONAL_LANGUAGES",
    "ALL_LANGUAGES",
    "resolve_language_alias",
    "get_language_info",
    "get_popular_languages",
    "LanguageRegistry",
]
