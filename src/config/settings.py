"""
Application settings and configuration

Uses pydantic-settings for type-safe configuration via environment variables.
All settings use MATHDOWN_ prefix (e.g., MATHDOWN_STRICT_DELIMITERS=true).

Settings can also be loaded from a .env file in the project root.
"""

from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


# KaTeX 0.12 stylesheet link, the same header mdbook-katex emits. It does not
# style the MathML produced by the default backend; override with
# MATHDOWN_STYLESHEET_HEADER.
STYLESHEET_HEADER = (
    '<link rel="stylesheet" '
    'href="https://cdn.jsdelivr.net/npm/katex@0.12.0/dist/katex.min.css" '
    'integrity="sha384-AfEj0r4/OFrOo5t7NnNe46zW/tFgW6x/bCJG8FqQCEo3+Aro6EYUG4+cU+KJWu/X" '
    'crossorigin="anonymous">\n\n'
)


class AppSettings(BaseSettings):
    """
    Application configuration via environment variables.

    Environment variables use MATHDOWN_ prefix.

    Examples:
        MATHDOWN_MACROS_PATH=book/macros.txt
        MATHDOWN_STRICT_DELIMITERS=true
        MATHDOWN_DOCUMENT_PATTERN=**/*.markdown
    """

    model_config = SettingsConfigDict(
        env_prefix="MATHDOWN_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        frozen=True,
    )

    # Delimiter configuration
    block_delimiter: str = Field(
        default="$$",
        min_length=1,
        description="Marker enclosing display (block) math; split before the inline marker",
    )

    inline_delimiter: str = Field(
        default="$",
        min_length=1,
        description="Marker enclosing inline math; only applied to text outside block math",
    )

    strict_delimiters: bool = Field(
        default=False,
        description="Keep an unmatched trailing delimiter run as literal text instead of rendering it",
    )

    # Macro configuration
    macros_path: Optional[str] = Field(
        default=None,
        description="File of '\\name:body' macro definitions, one per line",
    )

    macro_expansion_limit: int = Field(
        default=1000,
        ge=1,
        description="Maximum macro expansions per expression before it is rejected",
    )

    # Output configuration
    stylesheet_header: str = Field(
        default=STYLESHEET_HEADER,
        description="Static header emitted once before every rendered document",
    )

    supported_renderer: str = Field(
        default="html",
        description="The only host output target this preprocessor handles",
    )

    # Batch mode configuration
    document_pattern: str = Field(
        default="**/*.md",
        description="Glob (relative to inputdir) selecting documents to render",
    )


# Singleton instance - import this in your code
appsettings = AppSettings()
