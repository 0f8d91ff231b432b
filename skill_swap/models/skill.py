# skill_swap/models/skill.py
from sqlalchemy import Column, Integer, String, Text, ForeignKey, TIMESTAMP, func
from sqlalchemy.orm import relationship
from skill_swap.database import Base


class SkillOffered(Base):
    __tablename__ = "skills_offered"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        index=True,
        nullable=False
    )
    name = Column(String(100), nullable=False, index=True)
    category = Column(String(50), nullable=False, default="Other")
    level = Column(String(20), nullable=False, default="INTERMEDIATE")
    description = Column(Text)
    created_at = Column(TIMESTAMP, server_default=func.now())

    user = relationship("User", back_populates="skills_offered")


class SkillWanted(Base):
    __tablename__ = "skills_wanted"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        index=True,
        nullable=False
    )
    name = Column(String(100), nullable=False, index=True)
    category = Column(String(50), nullable=False, default="Other")
    priority = Column(String(20), nullable=False, default="MEDIUM")
    created_at = Column(TIMESTAMP, server_default=func.now())

    user = relationship("User", back_populates="skills_wanted")
