from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


SkillCategory = Literal["Technology", "Creative", "Business", "Languages", "Life Skills", "Other"]
SkillLevel = Literal["BEGINNER", "INTERMEDIATE", "ADVANCED", "EXPERT"]
Priority = Literal["HIGH", "MEDIUM", "LOW"]


# ======================
# SKILL SCHEMAS
# ======================

class SkillOfferedCreate(BaseModel):
    name: str = Field(..., min_length=2, max_length=100)
    category: SkillCategory = "Other"
    level: SkillLevel = "INTERMEDIATE"
    description: Optional[str] = Field(None, max_length=1000)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if len(v) < 2:
            raise ValueError("Skill name must be at least 2 characters")
        return v


class SkillWantedCreate(BaseModel):
    name: str = Field(..., min_length=2, max_length=100)
    category: SkillCategory = "Other"
    priority: Priority = "MEDIUM"

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if len(v) < 2:
            raise ValueError("Skill name must be at least 2 characters")
        return v


class SkillOffered(BaseModel):
    id: int
    name: str
    category: str
    level: str
    description: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class SkillWanted(BaseModel):
    id: int
    name: str
    category: str
    priority: str

    model_config = ConfigDict(from_attributes=True)


# ======================
# USER SCHEMAS
# ======================

class UserSummary(BaseModel):
    id: int
    name: str

    model_config = ConfigDict(from_attributes=True)


class User(BaseModel):
    id: int
    name: str
    email: str
    role: str
    status: str
    is_public: bool
    is_verified: bool
    bio: Optional[str] = None
    location: Optional[str] = None
    created_at: Optional[datetime] = None
    skills_offered: List[SkillOffered] = []
    skills_wanted: List[SkillWanted] = []

    model_config = ConfigDict(from_attributes=True)


class UserUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=2, max_length=100)
    bio: Optional[str] = Field(None, max_length=250)
    location: Optional[str] = Field(None, max_length=100)
    is_public: Optional[bool] = None
