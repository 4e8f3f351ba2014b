from enum import Enum as PyEnum


class UserRole(str, PyEnum):
    super_admin = "super_admin"
    admin = "admin"
    student = "student"


class AvatarType(str, PyEnum):
    rocket = "rocket"
    star = "star"
    lightning = "lightning"
    trophy = "trophy"
    medal = "medal"
    fire = "fire"
    robot = "robot"
    laptop = "laptop"
    wrench = "wrench"
    gear = "gear"


class TicketStatus(str, PyEnum):
    pending = "pending"
    in_progress = "in_progress"
    completed = "completed"
    issue = "issue"


class TicketPriority(str, PyEnum):
    low = "low"
    medium = "medium"
    high = "high"


class DeviceType(str, PyEnum):
    ipad = "ipad"
    chromebook = "chromebook"
    laptop = "laptop"
    pc_laptop = "pc_laptop"
    macbook = "macbook"


class IssueType(str, PyEnum):
    check = "check"
    repair = "repair"


class Difficulty(str, PyEnum):
    beginner = "beginner"
    intermediate = "intermediate"
    advanced = "advanced"


class Category(str, PyEnum):
    hardware = "hardware"
    software = "software"
    network = "network"
    security = "security"
    troubleshooting = "troubleshooting"
    best_practices = "best_practices"
    certifications = "certifications"


class ContentType(str, PyEnum):
    article = "article"
    video = "video"
    interactive = "interactive"
    document = "document"


class AchievementIcon(str, PyEnum):
    trophy = "trophy"
    medal = "medal"
    star = "star"
    fire = "fire"
    lightning = "lightning"
    gear = "gear"
    wrench = "wrench"
    rocket = "rocket"
    shield = "shield"
    crown = "crown"


class CertificationStatus(str, PyEnum):
    not_started = "not_started"
    in_progress = "in_progress"
    earned = "earned"
