from . import db
from datetime import datetime, timezone


class Customer(db.Model):
    __tablename__ = "customers"

    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    name = db.Column(db.String(100), nullable=False)
    address = db.Column(db.String(255), nullable=False)
    monthly_usage = db.Column(db.Float, nullable=False, default=0)
    alert = db.Column(db.String(20), nullable=True)
    created_at = db.Column(
        db.DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        index=True,
    )

    def to_dict(self) -> dict:
        created_at = self.created_at
        if created_at is not None and created_at.tzinfo is None:
            # sqlite drops the tz info on the way back out
            created_at = created_at.replace(tzinfo=timezone.utc)

        return {
            "id": self.id,
            "name": self.name,
            "address": self.address,
            "monthly_usage": _plain_number(self.monthly_usage),
            "alert": self.alert,
            "created_at": created_at.isoformat() if created_at else None,
        }


def _plain_number(value):
    # Float columns hand back 850.0 for 850
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value
