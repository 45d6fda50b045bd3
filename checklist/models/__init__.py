# Importing the package registers every table on Base.metadata
# (alembic autogenerate, create_all and FK resolution rely on it).
from checklist.models.inspection import InspectionRecord  # noqa: F401
from checklist.models.inspection_item import InspectionItemRecord  # noqa: F401
from checklist.models.inspection_question import InspectionQuestionRecord  # noqa: F401
from checklist.models.photo import PhotoRecord  # noqa: F401
