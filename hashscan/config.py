from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True, extra="ignore")

    # Database (кэш отчётов)
    DATABASE_URL: str = "sqlite:///./hashscan.db"

    # VirusTotal
    VIRUSTOTAL_API_KEY: str = ""
    VIRUSTOTAL_API_BASE: str = "https://www.virustotal.com/api/v3"
    VT_TIMEOUT: float = 30.0

    # UI
    DEFAULT_THEME: str = "light"

    # App names / debug
    app_name: str = "HashScan"
    debug: bool = False


settings = Settings()

# Вывод диагностики при загрузке
if settings.debug:
    print("\n📋 Configuration loaded:")
    print(f"   app_name: {settings.app_name}")
    print(f"   VIRUSTOTAL_API_KEY: {'✅ Set' if settings.VIRUSTOTAL_API_KEY else '❌ Missing'}")
    print(f"   VIRUSTOTAL_API_BASE: {settings.VIRUSTOTAL_API_BASE}")
    print(f"   DATABASE_URL: {settings.DATABASE_URL}")
    print(f"   VT_TIMEOUT: {settings.VT_TIMEOUT}s")
    print()
