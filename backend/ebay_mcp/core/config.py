from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Central settings object.
    Vercel / Render provide env vars; locally you can use backend/.env.
    """
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # eBay OAuth credentials
    EBAY_CLIENT_ID: str = ""
    EBAY_CLIENT_SECRET: str = ""
    EBAY_REFRESH_TOKEN: str = ""
    EBAY_GRANT_TYPE: str = "auto"  # auto | refresh_token | client_credentials
    EBAY_OAUTH_SCOPE: str = "https://api.ebay.com/oauth/api_scope"

    # Target marketplace
    EBAY_ENV: str = "production"  # production | sandbox
    EBAY_MARKETPLACE_ID: str = "EBAY_US"

    # Enrichment behavior
    DETAIL_CONCURRENCY: int = 5
    ENRICH_DETAILS: bool = True
    HTTP_TIMEOUT_SECONDS: float = 15.0
    TOKEN_SAFETY_MARGIN_SECONDS: float = 60.0

    LOG_LEVEL: str = "INFO"

    # Versioning
    APP_VERSION: str = "0.1.0"
    BUILD_ID: str = "dev"

    @property
    def is_sandbox(self) -> bool:
        return (self.EBAY_ENV or "").strip().lower() == "sandbox"

    @property
    def api_base_url(self) -> str:
        return "https://api.sandbox.ebay.com" if self.is_sandbox else "https://api.ebay.com"

    @property
    def web_base_url(self) -> str:
        return "https://www.sandbox.ebay.com" if self.is_sandbox else "https://www.ebay.com"

    @property
    def grant_type(self) -> str:
        """
        Resolves EBAY_GRANT_TYPE=auto to the grant the credentials support.
        """
        mode = (self.EBAY_GRANT_TYPE or "auto").strip().lower()
        if mode in ("refresh_token", "client_credentials"):
            return mode
        return "refresh_token" if self.EBAY_REFRESH_TOKEN.strip() else "client_credentials"


# ✅ MUST EXIST: other modules import this
settings = Settings()
