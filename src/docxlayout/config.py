"""Settings for the docxlayout command line."""

from pydantic_settings import BaseSettings, SettingsConfigDict

from docxlayout.docx_parser.package import PackageLimits


class Settings(BaseSettings):
    log_level: str = "WARNING"
    log_format: str = "%(levelname)s %(name)s: %(message)s"

    max_entries: int = 10_000
    max_part_bytes: int = 256 * 1024 * 1024
    max_compression_ratio: float = 500.0

    model_config = SettingsConfigDict(env_prefix="DOCXLAYOUT_", env_file=".env", extra="ignore")

    def package_limits(self) -> PackageLimits:
        return PackageLimits(
            max_entries=self.max_entries,
            max_part_bytes=self.max_part_bytes,
            max_compression_ratio=self.max_compression_ratio,
        )


settings = Settings()
