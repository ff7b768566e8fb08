from types import SimpleNamespace

from storefront.services.event_bus import THEME_CHANGED, EventBus
from storefront.services.presentation import PresentationState


def _theme(slug, **variables):
    return SimpleNamespace(slug=slug, css_variables=variables)


def _state_with_recorder():
    bus = EventBus()
    received = []
    bus.subscribe(THEME_CHANGED, received.append)
    return PresentationState(bus=bus), received


def test_apply_theme_sets_variables_attribute_and_local_storage():
    state, received = _state_with_recorder()

    state.apply_theme(_theme("light", **{"--color-primary": "#3B82F6"}))

    assert state.root_style == {"--color-primary": "#3B82F6"}
    assert state.root_attributes == {"data-theme": "light"}
    assert state.local_storage == {"current_theme_slug": "light"}
    assert state.current_slug == "light"
    assert state.stored_slug == "light"
    assert received == [{}]


def test_apply_theme_removes_variables_the_new_theme_does_not_define():
    state, _received = _state_with_recorder()
    state.apply_theme(_theme("noel", **{"--color-primary": "#C41E3A", "--color-accent": "#FFD700"}))

    state.apply_theme(_theme("light", **{"--color-primary": "#3B82F6"}))

    assert state.root_style == {"--color-primary": "#3B82F6"}
    assert state.current_slug == "light"


def test_apply_theme_with_empty_variables_still_records_slug():
    state, received = _state_with_recorder()
    state.apply_theme(_theme("old", **{"--x": "1"}))

    state.apply_theme(SimpleNamespace(slug="bare", css_variables=None))

    assert state.root_style == {}
    assert state.current_slug == "bare"
    assert len(received) == 2


def test_subscribers_are_notified_until_unsubscribed():
    state, _received = _state_with_recorder()
    seen = []
    unsubscribe = state.subscribe(lambda current: seen.append(current.current_slug))

    state.apply_theme(_theme("light"))
    unsubscribe()
    state.apply_theme(_theme("dark"))

    assert seen == ["light"]


def test_failing_subscriber_does_not_block_the_event():
    state, received = _state_with_recorder()

    def _boom(_state):
        raise RuntimeError("listener broke")

    state.subscribe(_boom)
    state.apply_theme(_theme("light"))

    assert state.current_slug == "light"
    assert received == [{}]


def test_local_storage_seed_is_available_before_first_apply():
    state = PresentationState(local_storage={"current_theme_slug": "dark"}, bus=EventBus())

    assert state.stored_slug == "dark"
    assert state.current_slug is None


def test_to_css_renders_sorted_root_block():
    state, _received = _state_with_recorder()
    state.apply_theme(_theme("light", **{"--color-text-body": "#111827", "--color-primary": "#3B82F6"}))

    assert state.to_css() == (
        ':root, [data-theme="light"] {\n'
        "  --color-primary: #3B82F6;\n"
        "  --color-text-body: #111827;\n"
        "}\n"
    )


def test_to_css_without_variables():
    assert PresentationState(bus=EventBus()).to_css() == ":root {}\n"
