# Obrador - Configuration
# Application settings loaded from environment variables

from functools import lru_cache
from typing import Optional
from urllib.parse import quote_plus

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.
    
    Create a .env file in the project root for local development:
    
        # .env
        OBRADOR_DEBUG=true
        OBRADOR_DB_URL=sqlite:///./obrador.db
    
    To run against SQL Server leave OBRADOR_DB_URL unset and provide the
    server pieces instead:
    
        OBRADOR_DB_SERVER=localhost
        OBRADOR_DB_NAME=obrador
        OBRADOR_DB_USER=obrador_app
        OBRADOR_DB_PASSWORD=your_password_here
    """
    
    model_config = SettingsConfigDict(
        env_prefix="OBRADOR_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )
    
    # Application
    app_name: str = "Obrador"
    debug: bool = False
    log_level: str = "INFO"
    
    # Database - explicit URL wins over the SQL Server pieces
    db_url: Optional[str] = None
    db_server: Optional[str] = None
    db_port: int = 1433
    db_name: str = "obrador"
    db_user: str = ""
    db_password: str = ""
    db_trusted_connection: bool = False
    
    # Optional: Schema for all tables (SQL Server only)
    db_schema: Optional[str] = None
    
    # Connection pool settings
    db_pool_size: int = 5
    db_max_overflow: int = 10
    db_pool_timeout: int = 30
    db_pool_recycle: int = 1800  # Recycle connections after 30 min
    
    # Session lookup
    session_cookie_name: str = "obrador_session"
    
    # Timesheets
    edit_window_hours: int = 24
    list_default_limit: int = 500
    list_max_limit: int = 1000
    mine_limit: int = 200
    summary_default_limit: int = 1000
    summary_max_limit: int = 2000
    
    @property
    def database_url(self) -> str:
        """
        Resolve the SQLAlchemy URL.
        
        Uses db_url when set, SQL Server over pyodbc when db_server is set,
        and a local SQLite file otherwise.
        """
        if self.db_url:
            return self.db_url
        
        if not self.db_server:
            return "sqlite:///./obrador.db"
        
        if self.db_trusted_connection:
            # Windows Authentication
            connection_string = (
                f"DRIVER={{ODBC Driver 17 for SQL Server}};"
                f"SERVER={self.db_server},{self.db_port};"
                f"DATABASE={self.db_name};"
                f"Trusted_Connection=yes;"
            )
        else:
            connection_string = (
                f"DRIVER={{ODBC Driver 17 for SQL Server}};"
                f"SERVER={self.db_server},{self.db_port};"
                f"DATABASE={self.db_name};"
                f"UID={self.db_user};"
                f"PWD={self.db_password};"
            )
        
        return f"mssql+pyodbc:///?odbc_connect={quote_plus(connection_string)}"


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.
    
    Using lru_cache ensures we only load settings once.
    """
    return Settings()
