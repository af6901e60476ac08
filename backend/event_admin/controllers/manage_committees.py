"""Meeting category (committee) management screen."""
import logging
from typing import Optional

from fastapi import HTTPException

from event_admin.cache import QueryCache
from event_admin.controllers.manage_events import ModalMode, error_message
from event_admin.controllers.notifications import Notifier
from event_admin.permissions import Capabilities
from event_admin.schemas.category import Category, CategoryCreate, CategoryUpdate, DeletionInfo
from event_admin.schemas.views import Affordances, CommitteeRow, CommitteesView
from event_admin.services import category_service, event_views
from event_admin.services.queries import Queries
from event_admin.store.base import Store, StoreError

logger = logging.getLogger(__name__)

COMMISSION_SUBJECT = "Commission"


class ManageCommitteesController:
    def __init__(
        self,
        store: Store,
        cache: QueryCache,
        capabilities: Optional[Capabilities] = None,
        notifier: Optional[Notifier] = None,
        actor_id: Optional[str] = None,
    ):
        self.store = store
        self.cache = cache
        self.queries = Queries(store, cache)
        self.capabilities = capabilities or Capabilities()
        self.notifier = notifier or Notifier()
        self.actor_id = actor_id

        self.search = ""
        self.mode = ModalMode.closed
        self.selected: Optional[Category] = None
        self.name = ""
        self.form_errors: dict[str, str] = {}
        self.pending_delete: Optional[DeletionInfo] = None

    def set_search(self, term: str) -> None:
        self.search = term

    def open_add(self) -> None:
        self.selected = None
        self.name = ""
        self.form_errors = {}
        self.mode = ModalMode.create

    def open_view(self, category: Category) -> None:
        self.selected = category
        self.name = category.name
        self.form_errors = {}
        self.mode = ModalMode.view

    def switch_to_edit(self) -> None:
        if self.mode == ModalMode.view and self.selected is not None:
            self.mode = ModalMode.edit

    def close(self) -> None:
        self.mode = ModalMode.closed
        self.selected = None
        self.name = ""
        self.form_errors = {}

    def submit(self) -> bool:
        """Create or rename the category depending on the modal mode."""
        if not self.name.strip():
            self.form_errors = {"name": "Name is required"}
            return False
        self.form_errors = {}

        try:
            if self.mode == ModalMode.edit and self.selected is not None:
                category = category_service.update_meeting_category(
                    self.store, self.cache, self.selected.id, CategoryUpdate(name=self.name), actor_id=self.actor_id
                )
                self.notifier.success(f"Meeting category '{category.name}' updated")
            else:
                category = category_service.create_meeting_category(
                    self.store, self.cache, CategoryCreate(name=self.name), actor_id=self.actor_id
                )
                self.notifier.success(f"Meeting category '{category.name}' created")
        except (StoreError, HTTPException) as e:
            self.notifier.error(error_message(e))
            return False

        self.close()
        return True

    def request_delete(self, category: Category) -> Optional[DeletionInfo]:
        """Look up what references ``category`` and open the delete confirmation."""
        self.close()
        try:
            self.pending_delete = category_service.meeting_category_dependencies(self.store, category.id)
        except (StoreError, HTTPException) as e:
            self.notifier.error(error_message(e))
            self.pending_delete = None
        return self.pending_delete

    def cancel_delete(self) -> None:
        self.pending_delete = None

    def confirm_delete(self) -> bool:
        info = self.pending_delete
        if info is None:
            return False
        if info.blocked:
            self.notifier.error(
                f"'{info.category.name}' has {len(info.meetings)} meeting(s) and cannot be deleted"
            )
            return False

        self.pending_delete = None
        try:
            category_service.delete_meeting_category(self.store, self.cache, info.category.id)
        except (StoreError, HTTPException) as e:
            self.notifier.error(error_message(e))
            return False

        if info.has_soft_dependencies:
            self.notifier.warning(
                f"Removed {len(info.participants)} participant link(s) and {len(info.events)} event link(s)"
            )
        self.notifier.success(f"Meeting category '{info.category.name}' deleted")
        return True

    def affordances(self) -> Affordances:
        return Affordances(
            create=self.capabilities.can("create", COMMISSION_SUBJECT),
            update=self.capabilities.can("update", COMMISSION_SUBJECT),
            delete=self.capabilities.can("delete", COMMISSION_SUBJECT),
        )

    def filtered_categories(self) -> list[Category]:
        return event_views.filter_categories(self.queries.meeting_categories(), self.search)

    def rows(self) -> list[CommitteeRow]:
        usage = event_views.meeting_category_usage(
            self.queries.meetings(),
            self.queries.participant_meeting_categories(),
            self.queries.organizing_meeting_categories(),
        )
        rows = []
        for category in self.filtered_categories():
            meetings, participants, events = usage.get(category.id, (0, 0, 0))
            rows.append(
                CommitteeRow(
                    category=category,
                    meetings_count=meetings,
                    participants_count=participants,
                    events_count=events,
                )
            )
        return rows

    def view(self) -> CommitteesView:
        return CommitteesView(search=self.search, categories=self.rows(), affordances=self.affordances())
