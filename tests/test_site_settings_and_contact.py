import pytest

from storefront.core.errors import ValidationError
from storefront.models.contact import Contact
from storefront.services.contacts import extract_map_embed_url, get_contact, save_contact
from storefront.services.event_bus import SITE_LOGO_CHANGED, event_bus
from storefront.services.site_settings import get_logo_settings, save_logo_settings
from tests.db_helpers import make_session


def test_logo_settings_default_to_none():
    assert get_logo_settings(make_session()) == {"site_logo": None, "site_logo_url": None, "favicon_url": None}


def test_save_logo_settings_upserts_and_broadcasts():
    db = make_session()
    received = []
    event_bus.subscribe(SITE_LOGO_CHANGED, received.append)
    try:
        save_logo_settings(db, site_logo="Lotus Shop", site_logo_url=None, favicon_url=None)
        saved = save_logo_settings(
            db,
            site_logo=" Lotus Shop ",
            site_logo_url=" logos/lotus.png ",
            favicon_url="",
        )
    finally:
        event_bus.unsubscribe(SITE_LOGO_CHANGED, received.append)

    assert saved == {"site_logo": "Lotus Shop", "site_logo_url": "logos/lotus.png", "favicon_url": None}
    assert len(received) == 2


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (None, None),
        ("", None),
        ("https://maps.example.com/embed?q=1", "https://maps.example.com/embed?q=1"),
        (
            '<iframe src="https://maps.example.com/embed?pb=xyz" width="600" height="450"></iframe>',
            "https://maps.example.com/embed?pb=xyz",
        ),
        ("<iframe width='600'></iframe>", None),
    ],
)
def test_extract_map_embed_url(value, expected):
    assert extract_map_embed_url(value) == expected


def test_save_contact_requires_email():
    db = make_session()

    with pytest.raises(ValidationError):
        save_contact(db, {"email": "  ", "phone": "0900"})

    assert get_contact(db) is None


def test_save_contact_keeps_single_row_and_cleans_fields():
    db = make_session()
    save_contact(db, {"email": "hello@example.com", "phone": "0900"})

    contact = save_contact(
        db,
        {
            "email": " shop@example.com ",
            "phone": "  ",
            "map_embed_url": "<iframe src='https://maps.example.com/e'></iframe>",
            "instagram_url": "https://instagram.com/lotus",
        },
    )

    assert db.query(Contact).count() == 1
    assert contact.email == "shop@example.com"
    assert contact.phone is None
    assert contact.map_embed_url == "https://maps.example.com/e"
    assert contact.instagram_url == "https://instagram.com/lotus"
    assert get_contact(db).id == contact.id
