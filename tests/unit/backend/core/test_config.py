"""
Unit Tests for configuration loading.

Reads the real YAML files under config/settings.
"""

import pytest
from pydantic import ValidationError

from studyshare.backend.core.config import get_app_config, get_server_base_url, get_uploads_dir
from studyshare.backend.core.config_schema import FeaturesSchema, RatingsSchema


class TestAppConfig:
    def test_rating_bounds(self):
        ratings = get_app_config().application.ratings
        assert (ratings.min_value, ratings.max_value) == (1, 5)

    def test_listing_sizes(self):
        listings = get_app_config().application.listings
        assert listings.home_top_notes == 4
        assert listings.leaderboard_size == 5

    def test_cookie_names(self):
        cookies = get_app_config().security.cookies
        assert cookies.user_cookie != cookies.admin_cookie

    def test_judge0_endpoint(self):
        assert get_app_config().services.judge0.base_url.startswith("https://")

    def test_base_url_has_no_trailing_slash(self):
        assert not get_server_base_url().endswith("/")

    def test_uploads_dir_exists(self):
        assert get_uploads_dir().is_dir()


class TestSchemas:
    def test_unknown_keys_rejected(self):
        with pytest.raises(ValidationError):
            FeaturesSchema(
                auth_google_enabled=True,
                playground_enabled=True,
                assistant_enabled=True,
                api_docs_enabled=False,
                surprise=True,
            )

    def test_inverted_rating_bounds_rejected(self):
        with pytest.raises(ValidationError):
            RatingsSchema(min_value=5, max_value=1)
