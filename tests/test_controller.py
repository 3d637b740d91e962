# tests/test_controller.py
import json

from admin_console.controller import CatalogController, CatalogSnapshot
from admin_console.reconciler import Draft
from admin_console.session import AdminSession
from catalog_sdk.models import Product

from conftest import PASSWORD


def ring(pid="a1"):
    return Product(id=pid, title="Ring", category="accessories", imageUrl="https://img.example/r.png")

def hamper(pid="g1"):
    return Product(id=pid, title="Hamper", category="gifts", imageUrl="https://img.example/h.png")

def fill_new(c, title="Ring"):
    c.reconciler.set_field("title", title)
    c.reconciler.set_image_url("https://img.example/new.png")


def test_wrong_password_changes_nothing(fake, session):
    c = CatalogController(fake, session, PASSWORD)
    assert not c.login("nope")
    assert c.error == "Invalid password"
    assert not session.authenticated
    assert not session.path.exists()
    assert fake.calls == []

def test_login_persists_marker_and_loads(fake, session):
    fake.remote["gifts"].append(hamper())
    c = CatalogController(fake, session, PASSWORD)
    assert c.login(PASSWORD)
    assert fake.ops() == ["list"]
    assert c.snapshot == CatalogSnapshot(accessories=(), gifts=(hamper(),))
    assert json.loads(session.path.read_text()) == {"authenticated": True}

def test_start_loads_when_already_authenticated(fake, session):
    session.mark_authenticated()
    c = CatalogController(fake, AdminSession(session.path), PASSWORD)
    assert c.start()
    assert fake.ops() == ["list"]

def test_start_without_session_does_nothing(fake, session):
    c = CatalogController(fake, session, PASSWORD)
    assert not c.start()
    assert fake.calls == []
    assert c.error is None

def test_create_is_followed_by_exactly_one_reload(controller, fake):
    fill_new(controller)
    assert controller.submit()
    assert fake.ops() == ["create", "list"]
    assert controller.draft == Draft()
    assert [p.title for p in controller.snapshot.accessories] == ["Ring"]

def test_snapshot_reflects_reload_not_local_guess(controller, fake):
    # the store normalises the title; the console must show the store's version
    original_create = fake.create
    def create(payload):
        product = original_create(payload)
        fake.remote["accessories"][-1] = product.model_copy(update={"title": "RING (store)"})
        return product
    fake.create = create

    fill_new(controller)
    assert controller.submit()
    assert [p.title for p in controller.snapshot.accessories] == ["RING (store)"]

def test_update_is_followed_by_exactly_one_reload(controller, fake):
    controller.begin_edit(hamper())
    controller.reconciler.set_field("description", "bigger")
    assert controller.submit()
    assert fake.ops() == ["update", "list"]

def test_failed_create_leaves_snapshot_and_draft(controller, fake):
    fake.remote["gifts"].append(hamper())
    assert controller.load()
    before = controller.snapshot
    fake.calls.clear()
    fake.fail.add("create")

    fill_new(controller)
    assert not controller.submit()

    assert controller.error == "Failed to add product."
    assert fake.ops() == ["create"]
    assert controller.snapshot is before
    assert controller.draft.title == "Ring"

def test_failed_update_message(controller, fake):
    fake.fail.add("update")
    controller.begin_edit(hamper())
    assert not controller.submit()
    assert controller.error == "Failed to update product."

def test_validation_error_is_surfaced_without_calls(controller, fake):
    controller.reconciler.set_field("title", "Ring")
    assert not controller.submit()
    assert controller.error == "Please provide an image (upload file or enter URL)"
    assert fake.calls == []

def test_upload_error_is_surfaced(controller, fake, image_file):
    fake.fail.add("upload")
    controller.reconciler.set_field("title", "Ring")
    controller.reconciler.select_file(image_file)
    assert not controller.submit()
    assert controller.error == "Image upload failed: HTTP 500"
    assert fake.ops() == ["upload"]

def test_delete_reloads_and_keeps_unrelated_draft(controller, fake):
    fake.remote["gifts"].append(hamper())
    controller.begin_edit(ring())
    assert controller.delete(hamper())
    assert fake.ops() == ["delete", "list"]
    assert fake.calls[0] == ("delete", "g1", "gifts")
    assert controller.reconciler.editing_id == "a1"
    assert controller.snapshot.gifts == ()

def test_deleting_edit_target_clears_draft(controller, fake):
    controller.begin_edit(ring())
    assert controller.delete(ring())
    assert controller.draft == Draft()

def test_failed_delete(controller, fake):
    fake.fail.add("delete")
    controller.begin_edit(ring())
    assert not controller.delete(ring())
    assert controller.error == "Failed to delete product."
    assert fake.ops() == ["delete"]
    assert controller.reconciler.editing_id == "a1"

def test_failed_load_keeps_previous_snapshot(controller, fake):
    fake.remote["gifts"].append(hamper())
    assert controller.load()
    before = controller.snapshot
    fake.fail.add("list")
    assert not controller.load()
    assert controller.error == "Failed to load products."
    assert controller.snapshot is before

def test_reload_failure_after_successful_create(controller, fake):
    fake.fail.add("list")
    fill_new(controller)
    assert not controller.submit()
    assert controller.error == "Failed to load products."
    assert controller.draft == Draft()

def test_mutations_refused_while_busy(controller, fake):
    results = []
    fake.hooks["create"] = lambda: results.append(
        (controller.busy, controller.delete(ring()), controller.error)
    )
    fill_new(controller)
    assert controller.submit()
    assert results == [(True, False, "Another operation is in progress.")]
    assert fake.ops() == ["create", "list"]
    assert controller.busy is False

def test_draft_cannot_be_swapped_while_busy(controller, fake):
    seen = []
    fake.hooks["update"] = lambda: seen.append((
        controller.begin_edit(ring()),
        controller.cancel_edit(),
        controller.reconciler.editing_id,
        controller.error,
    ))
    assert controller.begin_edit(hamper())
    assert controller.submit()
    assert seen == [(False, False, "g1", "Another operation is in progress.")]
    assert fake.ops() == ["update", "list"]

def test_mutations_require_login(fake, session):
    c = CatalogController(fake, session, PASSWORD)
    fill_new(c)
    assert not c.submit()
    assert c.error == "Login required"
    assert not c.delete(ring())
    assert fake.calls == []
