from skillproof.models.user import User
from skillproof.models.skill import Skill, UserSkill
from skillproof.models.proof import SkillProof
from skillproof.models.testbank import MiniTest, TestQuestion
from skillproof.models.attempt import TestAttempt
from skillproof.models.certificate import Certificate
from skillproof.models.job import JobListing, JobApplication

__all__ = [
    "User",
    "Skill",
    "UserSkill",
    "SkillProof",
    "MiniTest",
    "TestQuestion",
    "TestAttempt",
    "Certificate",
    "JobListing",
    "JobApplication",
]
