"""
Unit tests for campaign models and the in-memory campaign stores.
"""

from datetime import date, datetime, timedelta, timezone

import pytest

from recruitdesk.core.campaigns.models import (
    CampaignLeadNotFoundError,
    CampaignNotFoundError,
    CampaignStatus,
    CampaignType,
    LeadList,
    NewCampaign,
    validate_campaign_changes,
)
from recruitdesk.infrastructure.memory import InMemoryCampaignStore, InMemoryLeadListStore


def new_campaign(**overrides) -> NewCampaign:
    fields = {"athlete_id": "ath-1", "name": "Fall outreach", "type": "top"}
    fields.update(overrides)
    return NewCampaign(**fields)


class TestCampaignModels:

    def test_labels(self):
        assert CampaignType.SECOND_PASS.label == "Second Pass"
        assert CampaignType.PERSONAL_BEST.label == "Personal Best"
        assert CampaignStatus.EXHAUSTED.label == "Exhausted"

    def test_new_campaign_defaults_to_draft(self):
        campaign = new_campaign()
        assert campaign.type is CampaignType.TOP
        assert campaign.status is CampaignStatus.DRAFT

    def test_name_is_required(self):
        with pytest.raises(ValueError, match="name is required"):
            new_campaign(name="   ")

    def test_unknown_type_is_rejected(self):
        with pytest.raises(ValueError):
            new_campaign(type="fourth_pass")

    def test_send_cap_must_be_positive(self):
        with pytest.raises(ValueError, match="positive"):
            new_campaign(daily_send_cap=0)

    def test_end_date_not_before_start(self):
        with pytest.raises(ValueError, match="End date"):
            new_campaign(start_date=date(2026, 9, 1), end_date=date(2026, 8, 1))

    def test_changes_reject_unknown_fields(self):
        with pytest.raises(ValueError, match="is_deleted"):
            validate_campaign_changes({"is_deleted": True})

    def test_changes_coerce_enums(self):
        cleaned = validate_campaign_changes({"status": "paused"})
        assert cleaned["status"] is CampaignStatus.PAUSED


class TestInMemoryCampaignStore:

    def test_create_and_get(self):
        store = InMemoryCampaignStore()

        created = store.create(new_campaign(name="  Spring  "))

        assert store.get(created.id).name == "Spring"

    def test_search_pages_by_name(self):
        store = InMemoryCampaignStore()
        for name in ["Charlie", "alpha", "Bravo"]:
            store.create(new_campaign(name=name))

        first, more = store.search(page=0, page_size=2)
        second, more_after = store.search(page=1, page_size=2)

        assert [c.name for c in first] == ["Bravo", "Charlie"]
        assert more
        assert [c.name for c in second] == ["alpha"]
        assert not more_after

    def test_search_filters_term_and_athlete(self):
        store = InMemoryCampaignStore()
        store.create(new_campaign(name="Top schools"))
        store.create(new_campaign(name="Top backups", athlete_id="ath-2"))

        campaigns, _ = store.search("TOP", athlete_id="ath-2")

        assert [c.name for c in campaigns] == ["Top backups"]

    def test_soft_deleted_campaign_is_hidden(self):
        store = InMemoryCampaignStore()
        campaign = store.create(new_campaign())

        store.soft_delete(campaign.id)

        with pytest.raises(CampaignNotFoundError):
            store.get(campaign.id)
        assert store.search() == ([], False)
        assert store.campaigns[campaign.id].deleted_at is not None

    def test_update(self):
        store = InMemoryCampaignStore()
        campaign = store.create(new_campaign())

        updated = store.update(campaign.id, {"status": "active", "daily_send_cap": 40})

        assert updated.status is CampaignStatus.ACTIVE
        assert updated.daily_send_cap == 40

    def test_soft_delete_lead_is_idempotent(self):
        store = InMemoryCampaignStore(lead_ids=["lead-1"])

        store.soft_delete_lead("lead-1")
        store.soft_delete_lead("lead-1")

        assert store.leads["lead-1"] is True

    def test_missing_lead(self):
        with pytest.raises(CampaignLeadNotFoundError):
            InMemoryCampaignStore().soft_delete_lead("lead-404")


class TestInMemoryLeadListStore:

    def test_lists_newest_first(self):
        store = InMemoryLeadListStore()
        now = datetime.now(timezone.utc)
        older = LeadList(campaign_id="camp-1", file_url="a", row_count=1,
                         generated_by="m", generated_at=now - timedelta(days=1))
        newer = LeadList(campaign_id="camp-1", file_url="b", row_count=2,
                         generated_by="m", generated_at=now)
        other = LeadList(campaign_id="camp-2", file_url="c", row_count=3, generated_by="m")
        for lead_list in (older, newer, other):
            store.create(lead_list)

        assert [ll.file_url for ll in store.list_for_campaign("camp-1")] == ["b", "a"]

    def test_delete(self):
        store = InMemoryLeadListStore()
        lead_list = store.create(
            LeadList(campaign_id="camp-1", file_url="a", row_count=1, generated_by="m")
        )

        store.delete(lead_list.id)

        assert store.list_for_campaign("camp-1") == []
