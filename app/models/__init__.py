"""Import all models so SQLModel.metadata picks them up."""

from app.models.education import Education, EducationCreate, EducationRead, EducationUpdate
from app.models.experience import Experience, ExperienceCreate, ExperienceRead, ExperienceUpdate
from app.models.portfolio import (
    Portfolio,
    PortfolioCreate,
    PortfolioRead,
    PortfolioUpdate,
    SlugAvailability,
)
from app.models.project import Project, ProjectCreate, ProjectRead, ProjectUpdate
from app.models.skill import Skill, SkillCreate, SkillRead, SkillUpdate
from app.models.social_link import SocialLink, SocialLinkCreate, SocialLinkRead, SocialLinkUpdate
from app.models.theme import PortfolioTheme, ThemeLayout, ThemeRead, ThemeUpdate
from app.models.usage_record import AIUsageRecord
from app.models.user import ProfileUpdate, User, UserPublic, UserRead

__all__ = [
    "AIUsageRecord",
    "Education",
    "EducationCreate",
    "EducationRead",
    "EducationUpdate",
    "Experience",
    "ExperienceCreate",
    "ExperienceRead",
    "ExperienceUpdate",
    "Portfolio",
    "PortfolioCreate",
    "PortfolioRead",
    "PortfolioTheme",
    "PortfolioUpdate",
    "ProfileUpdate",
    "Project",
    "ProjectCreate",
    "ProjectRead",
    "ProjectUpdate",
    "Skill",
    "SkillCreate",
    "SkillRead",
    "SkillUpdate",
    "SlugAvailability",
    "SocialLink",
    "SocialLinkCreate",
    "SocialLinkRead",
    "SocialLinkUpdate",
    "ThemeLayout",
    "ThemeRead",
    "ThemeUpdate",
    "User",
    "UserPublic",
    "UserRead",
]
