import uuid

import pytest

from app.core.authorization import authorize
from app.core.errors import ErrorKind, NotAuthorizedError


def test_authorize_owner():
    user_id = uuid.uuid4()
    assert authorize(user_id, user_id) is None


def test_authorize_other_user():
    with pytest.raises(NotAuthorizedError) as exc_info:
        authorize(uuid.uuid4(), uuid.uuid4())
    assert exc_info.value.kind == ErrorKind.not_authorized
    assert exc_info.value.status_code == 403
