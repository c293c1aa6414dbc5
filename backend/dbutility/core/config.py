from pydantic_settings import BaseSettings, SettingsConfigDict

from dbutility.models import DataSource, ProductTypeEnum


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_ignore_empty=True,
        extra="ignore",
    )

    DB_PRODUCT_TYPE: ProductTypeEnum = ProductTypeEnum.SQLITE
    DB_HOST: str | None = None
    DB_PORT: int | None = None
    DB_DATABASE: str = "dbutility.sqlite3"
    DB_USERNAME: str | None = None
    DB_PASSWORD: str = ""

    # Pool for the configured database
    EXTERNAL_DB_POOL_SIZE: int = 5
    EXTERNAL_DB_CONNECT_TIMEOUT: int = 10  # seconds, passed to the driver

    @property
    def datasource(self) -> DataSource:
        return DataSource(
            product_type=self.DB_PRODUCT_TYPE,
            host=self.DB_HOST,
            port=self.DB_PORT,
            database=self.DB_DATABASE,
            username=self.DB_USERNAME,
            password=self.DB_PASSWORD,
        )


settings = Settings()  # type: ignore
