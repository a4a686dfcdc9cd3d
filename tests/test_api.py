import unittest

from fastapi.testclient import TestClient

from wearcast.main import app as fastapi_app
from wearcast.data_sources import WeatherFetchError
from wearcast.domain import WeatherSeries
from wearcast.exceptions import EmptyWindow
from wearcast.report_service import build_temperature_report, load_temperature_report


def _series():
    hourly = tuple([15.0] * 168) + (20.0,)
    return WeatherSeries(
        hourly_temperatures=hourly,
        daily_max=(20.0,) * 7 + (21.0,),
        daily_min=(10.0,) * 7 + (12.0,),
    )


class TestApi(unittest.TestCase):
    def setUp(self):
        import wearcast.api as api_mod
        from wearcast.config import settings

        self.api_mod = api_mod
        self.calls = []
        self._orig_loader = api_mod.load_temperature_report
        self._orig_api_key = settings.api_key

        async def fake_loader(provider, data_source=None, *, settings=None):
            self.calls.append(provider)
            return await load_temperature_report(provider, _FakeSource(), settings=settings)

        api_mod.load_temperature_report = fake_loader

    def tearDown(self):
        from wearcast.config import settings

        self.api_mod.load_temperature_report = self._orig_loader
        settings.api_key = self._orig_api_key

    def test_report_with_coordinates(self):
        client = TestClient(fastapi_app)
        resp = client.get("/v1/report", params={"latitude": 43.07, "longitude": -89.4, "accuracy": 30})
        self.assertEqual(resp.status_code, 200)
        data = resp.json()
        self.assertEqual(data["location"]["label"], "current location")
        self.assertFalse(data["location"]["is_default"])
        self.assertEqual(data["location"]["accuracy"], 30)
        self.assertEqual(data["current_temperature"], 20.0)
        self.assertEqual(data["today"], {"high": 21.0, "low": 12.0})
        self.assertEqual(len(data["comparisons"]), 3)
        self.assertEqual(data["comparisons"][0]["tier"], "significant")
        self.assertEqual(data["display"][0]["change"], "+5.0 °C")
        self.assertEqual(data["advice"], build_temperature_report(_series()).advice)

    def test_report_without_coordinates_uses_default(self):
        client = TestClient(fastapi_app)
        resp = client.get("/v1/report")
        self.assertEqual(resp.status_code, 200)
        self.assertTrue(resp.json()["location"]["is_default"])

    def test_report_rejects_out_of_range_latitude(self):
        client = TestClient(fastapi_app)
        resp = client.get("/v1/report", params={"latitude": 123, "longitude": 0})
        self.assertEqual(resp.status_code, 422)

    def test_fetch_failure_returns_retryable_503(self):
        async def failing_loader(*_args, **_kwargs):
            raise WeatherFetchError("failed to fetch weather data")

        self.api_mod.load_temperature_report = failing_loader
        client = TestClient(fastapi_app)
        resp = client.get("/v1/report")
        self.assertEqual(resp.status_code, 503)
        self.assertEqual(resp.json()["detail"]["retry"], True)

    def test_insufficient_history_returns_503(self):
        async def short_loader(*_args, **_kwargs):
            raise EmptyWindow("hourly_temperatures", 24)

        self.api_mod.load_temperature_report = short_loader
        client = TestClient(fastapi_app)
        resp = client.get("/v1/report")
        self.assertEqual(resp.status_code, 503)

    def test_api_key_required_when_set(self):
        from wearcast.config import settings

        settings.api_key = "sekret"
        client = TestClient(fastapi_app)

        missing = client.get("/v1/report")
        self.assertEqual(missing.status_code, 401)

        wrong = client.get("/v1/report", headers={"X-API-Key": "nope"})
        self.assertEqual(wrong.status_code, 401)

        ok = client.get("/v1/report", headers={"X-API-Key": "sekret"})
        self.assertEqual(ok.status_code, 200)

    def test_health(self):
        client = TestClient(fastapi_app)
        resp = client.get("/v1/health")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json(), {"status": "ok"})


class _FakeSource:
    def fetch_temperature_series(self, *_args, **_kwargs):
        return _series()


if __name__ == "__main__":
    unittest.main()
