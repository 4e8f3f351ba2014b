from app.model.schools import School
from app.model.users import User
from app.model.sessions import UserSession
from app.model.tickets import Ticket
from app.model.ticket_notes import TicketNote
from app.model.challenges import Challenge
from app.model.challenge_completions import ChallengeCompletion
from app.model.work_logs import WorkLog
from app.model.resources import Resource
from app.model.achievements import Achievement
from app.model.user_achievements import UserAchievement
from app.model.certifications import Certification
from app.model.user_certifications import UserCertification

__all__ = [
    "School",
    "User",
    "UserSession",
    "Ticket",
    "TicketNote",
    "Challenge",
    "ChallengeCompletion",
    "WorkLog",
    "Resource",
    "Achievement",
    "UserAchievement",
    "Certification",
    "UserCertification",
]
