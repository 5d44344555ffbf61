from typing import Annotated

from pydantic import AfterValidator
from app.features.users import validators

ValidatedName = Annotated[str, AfterValidator(validators.validate_name)]
ValidatedEmail = Annotated[str, AfterValidator(validators.validate_email)]
ValidatedPassword = Annotated[str, AfterValidator(validators.validate_password)]
