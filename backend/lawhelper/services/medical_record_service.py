# lawhelper/services/medical_record_service.py

from typing import Any, Dict, List, Optional
from uuid import UUID

from sqlalchemy.orm import Session

from lawhelper.core.logger import logger
from lawhelper.db.models import MedicalRecord
from lawhelper.services.ownership import get_owned, owned_query


class MedicalRecordService:
    """
    Service layer for medical records attached to cases.
    """

    @staticmethod
    def create_record(db: Session, user_id: UUID, record_data: Dict[str, Any]) -> MedicalRecord:
        """
        Create a record. The caller has already checked that the case belongs to ``user_id``.
        """
        try:
            record = MedicalRecord(user_id=user_id, **record_data)
            db.add(record)
            db.commit()
            db.refresh(record)

            logger.info(f"Medical record created: {record.id} for case {record.case_id}")
            return record

        except Exception as e:
            db.rollback()
            logger.error(f"Failed to create medical record: {str(e)}")
            raise

    @staticmethod
    def get_record(db: Session, user_id: UUID, record_id: UUID) -> Optional[MedicalRecord]:
        return get_owned(db, MedicalRecord, record_id, user_id)

    @staticmethod
    def list_for_case(db: Session, user_id: UUID, case_id: UUID) -> List[MedicalRecord]:
        """
        Records for one case, most recent service date first.
        """
        return (
            owned_query(db, MedicalRecord, user_id)
            .filter(MedicalRecord.case_id == case_id)
            .order_by(MedicalRecord.service_date.desc(), MedicalRecord.created_at.desc())
            .all()
        )

    @staticmethod
    def delete_record(db: Session, record: MedicalRecord) -> None:
        record_id = record.id
        try:
            db.delete(record)
            db.commit()
            logger.info(f"Medical record deleted: {record_id}")
        except Exception as e:
            db.rollback()
            logger.error(f"Failed to delete medical record {record_id}: {str(e)}")
            raise

    @staticmethod
    def records_as_text(records: List[MedicalRecord]) -> str:
        """
        Flatten records into plain text for the medical intelligence prompts,
        oldest first so chronologies read in order.
        """
        blocks: List[str] = []
        for r in sorted(records, key=lambda rec: rec.service_date):
            lines = [f"Date: {r.service_date.isoformat()}", f"Type: {r.record_type}"]
            if r.provider_name:
                lines.append(f"Provider: {r.provider_name}")
            if r.facility:
                lines.append(f"Facility: {r.facility}")
            if r.diagnosis_codes:
                lines.append(f"Diagnosis codes: {', '.join(r.diagnosis_codes)}")
            if r.procedure_codes:
                lines.append(f"Procedure codes: {', '.join(r.procedure_codes)}")
            if r.treatment:
                lines.append(f"Treatment: {r.treatment}")
            if r.medications:
                lines.append(f"Medications: {', '.join(r.medications)}")
            if r.charge_amount is not None:
                lines.append(f"Charged: {r.charge_amount:.2f}")
            if r.paid_amount is not None:
                lines.append(f"Paid: {r.paid_amount:.2f}")
            if r.notes:
                lines.append(f"Notes: {r.notes}")
            if r.raw_text:
                lines.append(r.raw_text)
            blocks.append("\n".join(lines))
        return "\n\n".join(blocks)
