"""
Application settings and configuration

Uses pydantic-settings for type-safe configuration via environment variables.
All settings use MDBABEL_ prefix (e.g., MDBABEL_STRICT_MODE=true).

Settings can also be loaded from a .env file in the project root.
"""

from typing import Tuple

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    """
    Application configuration via environment variables.

    Environment variables use MDBABEL_ prefix.

    Examples:
        MDBABEL_STRICT_MODE=true
        MDBABEL_PROPAGATE_EXIT_STATUS=true
        MDBABEL_BASH_PROGRAM=/usr/local/bin/bash
    """

    model_config = SettingsConfigDict(
        env_prefix="MDBABEL_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Document reading
    input_encoding: str = Field(
        default="utf-8",
        description="Encoding used to decode markdown documents read as bytes",
    )

    strict_mode: bool = Field(
        default=False,
        description="Strict mode: raise on malformed directives instead of silently stopping",
    )

    # Execution
    propagate_exit_status: bool = Field(
        default=False,
        description="Abort the run when an executed code block exits with a non-zero status",
    )

    sh_program: str = Field(
        default="sh",
        description="Interpreter used for 'sh' and 'shell' code blocks",
    )

    bash_program: str = Field(
        default="bash",
        description="Interpreter used for 'bash' code blocks",
    )

    inline_flag: str = Field(
        default="-c",
        description="Interpreter flag meaning 'the next argument is an inline script'",
    )

    # Dry-run listing
    listing_style: str = Field(
        default="default",
        description="Pygments style used when listing code blocks with --dryRun",
    )

    def baseArgs_make(self) -> Tuple[str, ...]:
        """
        Build the fixed leading arguments shared by the default executors.

        Returns:
            Tuple holding just the inline-script flag

        Example:
            >>> AppSettings().baseArgs_make()
            ('-c',)
        """
        return (self.inline_flag,)


# Singleton instance - import this in your code
appsettings = AppSettings()
