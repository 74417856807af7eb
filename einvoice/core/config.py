"""Core configuration with Pydantic v2 Settings."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Builder settings with environment variable support (prefix ``EINVOICE_``)."""

    model_config = SettingsConfigDict(env_prefix="EINVOICE_")

    log_level: str = "INFO"
    # Emit JSON lines instead of plain text records
    log_json: bool = False
    # Mask IBANs, e-mail addresses and phone numbers in log output
    pii_redaction: bool = True

    # Default for create_xml_document() when the caller passes no explicit flag
    remove_empty_nodes: bool = True
    pretty_print: bool = True


# Global settings instance
settings = Settings()
