import enum


class AccountRole(str, enum.Enum):
    USER = "User"
    ADMIN = "Admin"
    JUNIOR_ENGINEER = "JuniorEngineer"
    JUNIOR_ARCHITECT = "JuniorArchitect"
    ASSISTANT_ENGINEER = "AssistantEngineer"
    ASSISTANT_ARCHITECT = "AssistantArchitect"
    JUNIOR_LICENCE_ENGINEER = "JuniorLicenceEngineer"
    ASSISTANT_LICENCE_ENGINEER = "AssistantLicenceEngineer"
    JUNIOR_STRUCTURAL_ENGINEER = "JuniorStructuralEngineer"
    ASSISTANT_STRUCTURAL_ENGINEER = "AssistantStructuralEngineer"
    JUNIOR_SUPERVISOR1 = "JuniorSupervisor1"
    ASSISTANT_SUPERVISOR1 = "AssistantSupervisor1"
    JUNIOR_SUPERVISOR2 = "JuniorSupervisor2"
    ASSISTANT_SUPERVISOR2 = "AssistantSupervisor2"
    EXECUTIVE_ENGINEER = "ExecutiveEngineer"
    CITY_ENGINEER = "CityEngineer"
    CLERK = "Clerk"


class PositionType(enum.IntEnum):
    ARCHITECT = 0
    STRUCTURAL_ENGINEER = 1
    LICENCE_ENGINEER = 2
    SUPERVISOR1 = 3
    SUPERVISOR2 = 4


class Gender(enum.IntEnum):
    MALE = 0
    FEMALE = 1
    OTHER = 2


class DocumentType(enum.IntEnum):
    ADDRESS_PROOF = 0
    PAN_CARD = 1
    AADHAR_CARD = 2
    DEGREE_CERTIFICATE = 3
    DEGREE_MARKSHEET = 4
    EXPERIENCE_CERTIFICATE = 5
    COA_CERTIFICATE = 6
    PROFILE_PICTURE = 7
    ELECTRICITY_BILL = 8
    ADDITIONAL_DOCUMENT = 9


class SpecializationType(enum.IntEnum):
    ARCHITECTURE = 0
    CIVIL_ENGINEERING = 1
    STRUCTURAL_ENGINEERING = 2
    CONSTRUCTION = 3
    OTHER = 4


class ApplicationStage(enum.IntEnum):
    JUNIOR_ENGINEER_PENDING = 0
    DOCUMENT_VERIFICATION_PENDING = 1
    ASSISTANT_ENGINEER_PENDING = 2
    EXECUTIVE_ENGINEER_PENDING = 3
    CITY_ENGINEER_PENDING = 4
    PAYMENT_PENDING = 5
    CLERK_PENDING = 6
    EXECUTIVE_ENGINEER_SIGN_PENDING = 7
    CITY_ENGINEER_SIGN_PENDING = 8
    APPROVED = 9
    REJECTED = 10


class ApplicationStatus(enum.IntEnum):
    DRAFT = 0
    SUBMITTED = 1
    UNDER_REVIEW = 2
    DOCUMENT_VERIFICATION_PENDING = 3
    DOCUMENT_VERIFIED = 4
    APPOINTMENT_SCHEDULED = 5
    APPOINTMENT_COMPLETED = 6
    JUNIOR_ENGINEER_APPROVED = 7
    ASSISTANT_ENGINEER_APPROVED = 8
    EXECUTIVE_ENGINEER_APPROVED = 9
    CITY_ENGINEER_APPROVED = 10
    PAYMENT_PENDING = 11
    PAYMENT_COMPLETED = 12
    CLERK_APPROVED = 13
    DIGITALLY_SIGNED_BY_EXECUTIVE = 14
    DIGITALLY_SIGNED_BY_CITY = 15
    COMPLETED = 16
    REJECTED = 17


class OtpPurpose(str, enum.Enum):
    LOGIN = "login"
    APPROVAL = "approval"


class RejectionCategory(str, enum.Enum):
    DOCUMENTS = "documents"
    INFORMATION = "information"
    VERIFICATION = "verification"
    COMPLIANCE = "compliance"
    OTHER = "other"


class PaymentStatus(enum.Enum):
    PENDING = "PENDING"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"
    CANCELLED = "CANCELLED"
    REFUNDED = "REFUNDED"
