from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

FIFTEEN_MINUTES_MS = 15 * 60 * 1000


class EditPostRules(BaseModel):
    enabled: bool = False
    text: str = "Edit page"
    url: str = ""


class SiteRules(BaseModel):
    """Site-wide build configuration, loaded once at build start."""

    model_config = ConfigDict(populate_by_name=True)

    website: str
    title: str
    author: str
    description: str = Field(default="", alias="desc")
    og_image: str | None = Field(default=None, alias="ogImage")

    # Scheduling
    timezone: str = "UTC"
    scheduled_post_margin: int = Field(
        default=FIFTEEN_MINUTES_MS, ge=0, alias="scheduledPostMargin"
    )

    # Listings and feeds
    post_per_page: int = Field(default=4, ge=1, alias="postPerPage")
    rss_limit: int = Field(default=50, ge=1, alias="rssLimit")
    reading_time_wpm: int = Field(default=200, ge=1, alias="readingTimeWPM")
    dynamic_og_image: bool = Field(default=True, alias="dynamicOgImage")
    show_archives: bool = Field(default=True, alias="showArchives")
    edit_post: EditPostRules = Field(default_factory=EditPostRules, alias="editPost")

    # i18n
    default_locale: str = Field(default="en", alias="defaultLocale")
    locales: dict[str, str] = Field(default_factory=lambda: {"en": "English"})

    @field_validator("website")
    @classmethod
    def _website_has_trailing_slash(cls, value: str) -> str:
        if not value.startswith(("http://", "https://")):
            raise ValueError("website must be an absolute http(s) URL")
        return value if value.endswith("/") else value + "/"

    @field_validator("timezone")
    @classmethod
    def _timezone_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("timezone must not be empty")
        return value

    @model_validator(mode="after")
    def _default_locale_is_supported(self) -> "SiteRules":
        if self.default_locale not in self.locales:
            raise ValueError(
                f"default_locale '{self.default_locale}' is not one of {sorted(self.locales)}"
            )
        return self

    @property
    def supported_locales(self) -> list[str]:
        return list(self.locales)
