"""Unit tests for AIRequestContext header generation."""
from liftlog_importer.ai.client_factory import AIRequestContext


class TestAIRequestContextHeaders:
    """Test Helicone header generation from AIRequestContext."""

    def test_empty_context_includes_environment_only(self):
        headers = AIRequestContext().to_tracking_headers("production")

        assert headers == {"Helicone-Property-Environment": "production"}

    def test_feature_name_maps_to_helicone_property_feature(self):
        headers = AIRequestContext(feature_name="workout_text_parsing").to_tracking_headers("development")

        assert headers["Helicone-Property-Feature"] == "workout_text_parsing"

    def test_request_id_maps_to_helicone_request_id(self):
        headers = AIRequestContext(request_id="req_xyz789").to_tracking_headers("development")

        assert headers["Helicone-Request-Id"] == "req_xyz789"

    def test_custom_properties_converted_to_title_case_headers(self):
        context = AIRequestContext(
            custom_properties={
                "model": "claude-3-haiku-20240307",
                "import_source": "text",
            }
        )
        headers = context.to_tracking_headers("development")

        assert headers["Helicone-Property-Model"] == "claude-3-haiku-20240307"
        assert headers["Helicone-Property-Import-Source"] == "text"

    def test_full_context_generates_all_headers(self):
        context = AIRequestContext(
            feature_name="workout_text_parsing",
            request_id="req_1",
            custom_properties={"model": "haiku"},
        )
        headers = context.to_tracking_headers("staging")

        assert headers == {
            "Helicone-Property-Feature": "workout_text_parsing",
            "Helicone-Request-Id": "req_1",
            "Helicone-Property-Environment": "staging",
            "Helicone-Property-Model": "haiku",
        }
