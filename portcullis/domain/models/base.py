"""Timestamp mixins; repositories call the touch hooks at the persistence boundary."""

from sqlalchemy import Column, DateTime

from portcullis.core.timeutils import utcnow


class CreatedRecord:
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    def touch_created(self) -> None:
        self.created_at = utcnow()

    def touch_updated(self) -> None:
        pass


class TimestampedRecord(CreatedRecord):
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    def touch_created(self) -> None:
        now = utcnow()
        self.created_at = now
        self.updated_at = now

    def touch_updated(self) -> None:
        self.updated_at = utcnow()
