"""
Consultant Onboarding Engine
Onboarding template catalog models.

Models:
    - OnboardingTemplate:        named prototype per consultant type
    - TemplateChecklistItem:     prototype checklist task
    - TemplateDocument:          prototype document requirement
    - TemplateTrainingModule:    prototype training module

Templates are read-only reference data for the engine. Workflows copy the
prototype rows at creation time and never point back at them, so editing a
template does not affect existing workflows.
"""

import logging
from datetime import datetime, timezone

from hr_onboarding.models import db
from hr_onboarding.models.onboarding import ConsultantType, enum_values, enum_value

logger = logging.getLogger(__name__)


def _utcnow():
    return datetime.now(timezone.utc)


class OnboardingTemplate(db.Model):
    __tablename__ = "onboarding_templates"

    id = db.Column(db.String(64), primary_key=True)
    name = db.Column(db.String(200), nullable=False)
    description = db.Column(db.Text, default="")
    consultant_type = db.Column(
        db.Enum(
            ConsultantType,
            name="template_consultant_type",
            native_enum=False,
            create_constraint=True,
            values_callable=enum_values,
            length=20,
        ),
        nullable=False,
    )
    default_duration = db.Column(db.Integer, nullable=False, default=30, comment="Days")
    is_active = db.Column(db.Boolean, nullable=False, default=True)

    created_at = db.Column(db.DateTime(timezone=True), default=_utcnow)
    updated_at = db.Column(db.DateTime(timezone=True), default=_utcnow, onupdate=_utcnow)

    checklist_items = db.relationship(
        "TemplateChecklistItem", backref="template",
        cascade="all, delete-orphan", order_by="TemplateChecklistItem.order",
    )
    documents = db.relationship(
        "TemplateDocument", backref="template",
        cascade="all, delete-orphan", order_by="TemplateDocument.position",
    )
    training = db.relationship(
        "TemplateTrainingModule", backref="template",
        cascade="all, delete-orphan", order_by="TemplateTrainingModule.order",
    )

    def to_dict(self, include_children=True):
        result = {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "consultant_type": enum_value(self.consultant_type),
            "default_duration": self.default_duration,
            "is_active": self.is_active,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }
        if include_children:
            result["checklist_items"] = [i.to_dict() for i in self.checklist_items]
            result["documents"] = [d.to_dict() for d in self.documents]
            result["training"] = [t.to_dict() for t in self.training]
        return result

    def __repr__(self):
        return f"<OnboardingTemplate {self.id}: {self.name}>"


class TemplateChecklistItem(db.Model):
    __tablename__ = "onboarding_template_checklist_items"

    id = db.Column(db.Integer, primary_key=True)
    template_id = db.Column(
        db.String(64), db.ForeignKey("onboarding_templates.id", ondelete="CASCADE"),
        nullable=False, index=True,
    )
    title = db.Column(db.String(300), nullable=False)
    description = db.Column(db.Text, default="")
    priority = db.Column(db.String(10), default="medium")
    category = db.Column(db.String(50), default="")
    order = db.Column(db.Integer, default=0)
    is_required = db.Column(db.Boolean, nullable=False, default=True)
    applicable_for = db.Column(db.JSON, default=list)

    def to_dict(self):
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "priority": self.priority,
            "category": self.category,
            "order": self.order,
            "is_required": self.is_required,
            "applicable_for": list(self.applicable_for or []),
        }


class TemplateDocument(db.Model):
    __tablename__ = "onboarding_template_documents"

    id = db.Column(db.Integer, primary_key=True)
    template_id = db.Column(
        db.String(64), db.ForeignKey("onboarding_templates.id", ondelete="CASCADE"),
        nullable=False, index=True,
    )
    name = db.Column(db.String(200), nullable=False)
    description = db.Column(db.Text, default="")
    category = db.Column(db.String(50), default="")
    is_required = db.Column(db.Boolean, nullable=False, default=True)
    applicable_for = db.Column(db.JSON, default=list)
    position = db.Column(db.Integer, default=0)

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "category": self.category,
            "is_required": self.is_required,
            "applicable_for": list(self.applicable_for or []),
        }


class TemplateTrainingModule(db.Model):
    __tablename__ = "onboarding_template_training_modules"

    id = db.Column(db.Integer, primary_key=True)
    template_id = db.Column(
        db.String(64), db.ForeignKey("onboarding_templates.id", ondelete="CASCADE"),
        nullable=False, index=True,
    )
    title = db.Column(db.String(300), nullable=False)
    description = db.Column(db.Text, default="")
    category = db.Column(db.String(50), default="")
    duration = db.Column(db.Integer, default=0)
    passing_score = db.Column(db.Integer, nullable=False, default=80)
    max_attempts = db.Column(db.Integer, nullable=False, default=3)
    is_required = db.Column(db.Boolean, nullable=False, default=True)
    applicable_for = db.Column(db.JSON, default=list)
    order = db.Column(db.Integer, default=0)

    __table_args__ = (
        db.CheckConstraint("max_attempts >= 1", name="ck_template_training_max_attempts_min"),
    )

    def to_dict(self):
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "category": self.category,
            "duration": self.duration,
            "passing_score": self.passing_score,
            "max_attempts": self.max_attempts,
            "is_required": self.is_required,
            "applicable_for": list(self.applicable_for or []),
            "order": self.order,
        }


# ═════════════════════════════════════════════════════════════════════════════
# Default catalog
# ═════════════════════════════════════════════════════════════════════════════

DEFAULT_TEMPLATES = [
    {
        "id": "template_employee",
        "name": "Full-Time Employee Onboarding",
        "description": "Complete onboarding for direct employees",
        "consultant_type": "employee",
        "default_duration": 30,
        "checklist_items": [
            {"title": "Send Welcome Email", "description": "Send personalized welcome email with first day details",
             "priority": "high", "category": "hr", "order": 1, "applicable_for": ["employee", "contractor"]},
            {"title": "Setup Workstation", "description": "Prepare desk, computer, and necessary equipment",
             "priority": "high", "category": "it", "order": 2, "applicable_for": ["employee"]},
            {"title": "Create IT Accounts", "description": "Setup email, Slack, and system access",
             "priority": "high", "category": "it", "order": 3, "applicable_for": ["employee", "contractor"]},
            {"title": "First Day Orientation", "description": "Conduct office tour and team introductions",
             "priority": "high", "category": "hr", "order": 4, "applicable_for": ["employee"]},
            {"title": "Benefits Enrollment", "description": "Complete health insurance and 401k setup",
             "priority": "high", "category": "hr", "order": 5, "applicable_for": ["employee"]},
        ],
        "documents": [
            {"name": "Employment Contract", "description": "Signed employment agreement",
             "category": "contract", "applicable_for": ["employee"]},
            {"name": "W-4 Tax Form", "description": "Federal tax withholding form",
             "category": "tax", "applicable_for": ["employee"]},
            {"name": "I-9 Verification", "description": "Employment eligibility verification",
             "category": "identity", "applicable_for": ["employee"]},
            {"name": "Direct Deposit Form", "description": "Banking information for payroll",
             "category": "banking", "applicable_for": ["employee"]},
        ],
        "training": [
            {"title": "Company Overview", "description": "Learn about company history, mission, and values",
             "category": "hr-policy", "duration": 30, "passing_score": 80, "max_attempts": 3,
             "order": 1, "applicable_for": ["employee", "contractor"]},
            {"title": "HR Policies & Procedures", "description": "Understand workplace policies and guidelines",
             "category": "hr-policy", "duration": 45, "passing_score": 80, "max_attempts": 3,
             "order": 2, "applicable_for": ["employee"]},
            {"title": "Workplace Safety", "description": "Safety protocols and emergency procedures",
             "category": "safety", "duration": 20, "passing_score": 100, "max_attempts": 5,
             "order": 3, "applicable_for": ["employee", "contractor"]},
        ],
    },
    {
        "id": "template_contractor",
        "name": "Contractor Onboarding",
        "description": "Streamlined onboarding for contractors",
        "consultant_type": "contractor",
        "default_duration": 14,
        "checklist_items": [
            {"title": "Send Welcome Email", "description": "Send welcome email with project details",
             "priority": "high", "category": "hr", "order": 1, "applicable_for": ["contractor"]},
            {"title": "Create System Access", "description": "Setup necessary system and tool access",
             "priority": "high", "category": "it", "order": 2, "applicable_for": ["contractor"]},
            {"title": "Project Briefing", "description": "Introduce to project scope and expectations",
             "priority": "high", "category": "admin", "order": 3, "applicable_for": ["contractor"]},
        ],
        "documents": [
            {"name": "Contractor Agreement", "description": "Signed independent contractor agreement",
             "category": "contract", "applicable_for": ["contractor"]},
            {"name": "W-9 Form", "description": "Taxpayer identification form",
             "category": "tax", "applicable_for": ["contractor"]},
            {"name": "NDA", "description": "Non-disclosure agreement",
             "category": "compliance", "applicable_for": ["contractor"]},
        ],
        "training": [
            {"title": "Company Overview", "description": "Brief introduction to company and culture",
             "category": "hr-policy", "duration": 20, "passing_score": 80, "max_attempts": 3,
             "order": 1, "applicable_for": ["contractor"]},
            {"title": "Security & Compliance", "description": "Data security and compliance requirements",
             "category": "compliance", "duration": 30, "passing_score": 90, "max_attempts": 3,
             "order": 2, "applicable_for": ["contractor"]},
        ],
    },
]


def build_template(data):
    """Build an (unsaved) OnboardingTemplate with its prototype rows from a dict."""
    template = OnboardingTemplate(
        id=data["id"],
        name=data["name"],
        description=data.get("description", ""),
        consultant_type=ConsultantType(data["consultant_type"]),
        default_duration=data.get("default_duration", 30),
        is_active=data.get("is_active", True),
    )
    for item in data.get("checklist_items", []):
        template.checklist_items.append(TemplateChecklistItem(
            title=item["title"],
            description=item.get("description", ""),
            priority=item.get("priority", "medium"),
            category=item.get("category", ""),
            order=item.get("order", 0),
            is_required=item.get("is_required", True),
            applicable_for=list(item.get("applicable_for", [])),
        ))
    for position, doc in enumerate(data.get("documents", [])):
        template.documents.append(TemplateDocument(
            name=doc["name"],
            description=doc.get("description", ""),
            category=doc.get("category", ""),
            is_required=doc.get("is_required", True),
            applicable_for=list(doc.get("applicable_for", [])),
            position=doc.get("position", position),
        ))
    for module in data.get("training", []):
        template.training.append(TemplateTrainingModule(
            title=module["title"],
            description=module.get("description", ""),
            category=module.get("category", ""),
            duration=module.get("duration", 0),
            passing_score=module.get("passing_score", 80),
            max_attempts=module.get("max_attempts", 3),
            is_required=module.get("is_required", True),
            applicable_for=list(module.get("applicable_for", [])),
            order=module.get("order", 0),
        ))
    return template


def seed_default_templates():
    """Insert the default employee and contractor templates that are missing.

    Idempotent by template id. Caller commits.

    Returns:
        Number of templates created.
    """
    created = 0
    for data in DEFAULT_TEMPLATES:
        if db.session.get(OnboardingTemplate, data["id"]):
            continue
        db.session.add(build_template(data))
        created += 1
    if created:
        db.session.flush()
        logger.info("Seeded %d default onboarding templates", created)
    return created
