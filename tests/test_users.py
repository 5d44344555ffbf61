import uuid

import pytest
import pytest_asyncio

from app.core.database.models import PlaceRow, UserRow
from app.core.geocoding import get_geocoder
from app.core.security import hash_password
from app.core.storage import LocalImageStorage, get_image_storage
from app.main import app as main_app
from tests.fixtures import JPEG_BYTES, PNG_BYTES
from tests.mock_geocoder import EMPIRE_STATE_ADDRESS, MockGeocoder

pytestmark = pytest.mark.asyncio
USER_ID = uuid.uuid4()
PLACE_ID = uuid.uuid4()
PASSWORD = "correct horse"


@pytest_asyncio.fixture(autouse=True, scope="function")
async def setup_fixture(session):
    user = UserRow(
        id=USER_ID,
        name="Max",
        email="max@example.com",
        password_hash=await hash_password(PASSWORD),
        image="uploads/images/max.png",
    )
    session.add(user)
    await session.commit()
    place = PlaceRow(
        id=PLACE_ID,
        title="Flatiron Building",
        description="Triangular",
        address="175 5th Ave, New York, NY 10010",
        latitude=40.7410605,
        longitude=-73.9896986,
        image="uploads/images/flatiron.png",
        creator_id=USER_ID,
    )
    session.add(place)
    await session.commit()


@pytest.fixture
def upload_dir(tmp_path):
    storage = LocalImageStorage(root=str(tmp_path))
    main_app.dependency_overrides[get_image_storage] = lambda: storage
    return tmp_path


def signup_form(email: str = "new@example.com", password: str = "secret123", name: str = "New"):
    return dict(
        data=dict(name=name, email=email, password=password),
        files=dict(image=("me.jpg", JPEG_BYTES, "image/jpeg")),
    )


async def test_get_users(client):
    response = await client.get("/users")
    assert response.status_code == 200
    assert response.json()["users"] == [
        {
            "id": str(USER_ID),
            "name": "Max",
            "email": "max@example.com",
            "image": "uploads/images/max.png",
            "places": [str(PLACE_ID)],
        }
    ]


async def test_signup(client, upload_dir):
    response = await client.post("/users/signup", **signup_form(email="New@Example.com"))
    assert response.status_code == 201
    body = response.json()
    assert body["email"] == "new@example.com"
    assert body["token"]
    assert len(list(upload_dir.iterdir())) == 1

    response = await client.get("/users")
    new_user = next(user for user in response.json()["users"] if user["id"] == body["userId"])
    assert new_user["places"] == []
    assert "passwordHash" not in new_user


async def test_signup_duplicate_email(client, upload_dir):
    response = await client.post("/users/signup", **signup_form(email="MAX@example.com"))
    assert response.status_code == 422
    assert response.json()["kind"] == "validation"
    # Uploaded image is removed when signup fails
    assert list(upload_dir.iterdir()) == []


async def test_signup_invalid_inputs(client, upload_dir):
    response = await client.post("/users/signup", **signup_form(email="not-an-email"))
    assert response.status_code == 422
    assert "email" in response.json()

    response = await client.post("/users/signup", **signup_form(password="short"))
    assert response.status_code == 422
    assert "password" in response.json()

    response = await client.post("/users/signup", **signup_form(name=""))
    assert response.status_code == 422
    assert list(upload_dir.iterdir()) == []


async def test_signup_invalid_image(client, upload_dir):
    form = signup_form()
    form["files"] = dict(image=("me.png", b"not really a png", "image/png"))
    response = await client.post("/users/signup", **form)
    assert response.status_code == 422
    assert response.json()["kind"] == "validation"


async def test_login(client):
    response = await client.post("/users/login", json=dict(email="Max@example.com", password=PASSWORD))
    assert response.status_code == 200
    body = response.json()
    assert body["userId"] == str(USER_ID)
    assert body["email"] == "max@example.com"
    assert body["token"]


async def test_login_wrong_password(client):
    response = await client.post("/users/login", json=dict(email="max@example.com", password="wrong password"))
    assert response.status_code == 401
    assert response.json()["kind"] == "not_authenticated"


async def test_login_unknown_email(client):
    response = await client.post("/users/login", json=dict(email="nobody@example.com", password=PASSWORD))
    assert response.status_code == 401


async def test_login_rate_limited(client):
    for _ in range(10):
        response = await client.post("/users/login", json=dict(email="nobody@example.com", password=PASSWORD))
        assert response.status_code == 401
    response = await client.post("/users/login", json=dict(email="nobody@example.com", password=PASSWORD))
    assert response.status_code == 429


async def test_token_authenticates_requests(client, upload_dir):
    geocoder = MockGeocoder()
    main_app.dependency_overrides[get_geocoder] = lambda: geocoder
    response = await client.post("/users/login", json=dict(email="max@example.com", password=PASSWORD))
    token = response.json()["token"]

    response = await client.post(
        "/places",
        headers={"Authorization": f"Bearer {token}"},
        data=dict(title="Empire State Building", description="Tall", address=EMPIRE_STATE_ADDRESS),
        files=dict(image=("empire.png", PNG_BYTES, "image/png")),
    )
    assert response.status_code == 201
    assert response.json()["place"]["creator"] == str(USER_ID)
