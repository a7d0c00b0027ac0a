"""attendbot Configuration.

Includes:
- AppConfig: Main application settings with environment variable support
- ResolverSettings: Knobs for the intent resolver

Environment Variables:
    ATTENDBOT_PROJECT_PATH: Directory holding .attendbot/config.yaml
    ATTENDBOT_PORTAL: Default portal for the CLI (hod, faculty, student)
    ATTENDBOT_DATA_FILE: Default directory seed file
    ATTENDBOT_HOD_ID: Restrict the HOD assistant to one department
    ATTENDBOT_FACULTY_ID: Signed-in faculty member for the faculty assistant
    ATTENDBOT_RESOLVER__EXPOSE_CREDENTIALS: Show (true) or mask (false) passwords
"""

from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ResolverSettings(BaseModel):
    """Intent resolver settings.

    Attributes:
        attendance_threshold: Minimum attendance percentage for good standing
        expose_credentials: Include plaintext passwords in credential answers
        max_input_length: Queries are truncated to this many characters
    """

    attendance_threshold: int = Field(default=75, ge=1, le=99)
    expose_credentials: bool = Field(
        default=True,
        description="Mask passwords as ******** when False",
    )
    max_input_length: int = Field(default=10_000, gt=0)


class AppConfig(BaseSettings):
    """Application configuration with environment variable support.

    Configuration is loaded from environment variables with ATTENDBOT_ prefix.
    For example, ATTENDBOT_PORTAL sets portal.

    Precedence (highest to lowest):
        1. Environment variables (ATTENDBOT_*)
        2. Config file (.attendbot/config.yaml)
        3. Default values
    """

    model_config = SettingsConfigDict(
        env_prefix="ATTENDBOT_",
        env_nested_delimiter="__",
        extra="ignore",
    )

    project_path: Path = Field(default_factory=Path.cwd)
    portal: str = "hod"
    data_file: Optional[Path] = None
    hod_id: Optional[str] = None
    faculty_id: Optional[str] = None

    resolver: ResolverSettings = Field(default_factory=ResolverSettings)

    @classmethod
    def load(cls, path: Path) -> "AppConfig":
        """Load configuration from .attendbot/config.yaml if it exists.

        Values already set through the environment win over the file. Resolver
        settings are merged field by field.

        Args:
            path: Project path to load configuration for

        Returns:
            AppConfig with file values applied (or defaults if no config exists)
        """
        from ruamel.yaml import YAML

        config = cls(project_path=path)
        config_file = path / ".attendbot" / "config.yaml"

        if config_file.exists():
            yaml = YAML()
            with config_file.open() as f:
                data = yaml.load(f)

            if data:
                explicit = config.model_fields_set
                if "portal" in data and "portal" not in explicit:
                    config.portal = str(data["portal"])
                if data.get("data_file") and "data_file" not in explicit:
                    config.data_file = path / data["data_file"]
                if data.get("hod_id") and "hod_id" not in explicit:
                    config.hod_id = str(data["hod_id"])
                if data.get("faculty_id") and "faculty_id" not in explicit:
                    config.faculty_id = str(data["faculty_id"])
                if "resolver" in data:
                    values = dict(data["resolver"] or {})
                    if "resolver" in explicit:
                        values.update(config.resolver.model_dump(exclude_unset=True))
                    config.resolver = ResolverSettings(**values)

        return config

    def save(self) -> None:
        """Save configuration to .attendbot/config.yaml in the project path."""
        from ruamel.yaml import YAML

        config_dir = self.project_path / ".attendbot"
        config_dir.mkdir(parents=True, exist_ok=True)
        config_file = config_dir / "config.yaml"

        yaml = YAML()
        yaml.default_flow_style = False

        data = {
            "portal": self.portal,
            "data_file": str(self.data_file) if self.data_file else None,
            "hod_id": self.hod_id,
            "faculty_id": self.faculty_id,
            "resolver": self.resolver.model_dump(),
        }

        with config_file.open("w") as f:
            yaml.dump(data, f)


__all__ = ["AppConfig", "ResolverSettings"]
