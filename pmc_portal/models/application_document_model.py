from sqlalchemy import Column, Text, Integer, Float, Date, ForeignKey, Enum as SAEnum
from pmc_portal.models.base import Base, IdType
from pmc_portal.models.enums import DocumentType, SpecializationType


class ApplicationDocument(Base):
    __tablename__ = "application_document_tbl"

    document_id = Column(IdType, primary_key=True, index=True)
    application_id = Column(IdType, ForeignKey("application_tbl.application_id", ondelete="CASCADE"), nullable=False)
    sort_order = Column(Integer, nullable=False, default=0)
    document_type = Column(SAEnum(DocumentType, name="document_type_enum"), nullable=False)
    file_id = Column(Text, nullable=False)
    file_path = Column(Text, nullable=False)
    file_name = Column(Text, nullable=False)


class Qualification(Base):
    __tablename__ = "qualification_tbl"

    qualification_id = Column(IdType, primary_key=True, index=True)
    application_id = Column(IdType, ForeignKey("application_tbl.application_id", ondelete="CASCADE"), nullable=False)
    file_id = Column(Text, nullable=False, default="")
    institute_name = Column(Text, nullable=False)
    university_name = Column(Text, nullable=False)
    specialization = Column(SAEnum(SpecializationType, name="specialization_enum"), nullable=False)
    degree_name = Column(Text, nullable=False)
    passing_month = Column(Integer, nullable=False)
    year_of_passing = Column(Date, nullable=False)


class Experience(Base):
    __tablename__ = "experience_tbl"

    experience_id = Column(IdType, primary_key=True, index=True)
    application_id = Column(IdType, ForeignKey("application_tbl.application_id", ondelete="CASCADE"), nullable=False)
    file_id = Column(Text, nullable=False, default="")
    company_name = Column(Text, nullable=False)
    position = Column(Text, nullable=False)
    years_of_experience = Column(Float, nullable=False)
    from_date = Column(Date, nullable=False)
    to_date = Column(Date, nullable=False)
