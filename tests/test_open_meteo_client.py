import datetime as dt
import unittest
from zoneinfo import ZoneInfo

import requests

from wearcast.data_sources import open_meteo_client
from wearcast.data_sources.open_meteo_client import WeatherFetchError


class DummyResp:
    def __init__(self, payload, error=None):
        self._payload = payload
        self._error = error

    def raise_for_status(self):
        if self._error:
            raise self._error

    def json(self):
        return self._payload


def _make_payload():
    return {
        "latitude": 35.7,
        "longitude": 139.625,
        "timezone": "Asia/Tokyo",
        "hourly_units": {"time": "iso8601", "temperature_2m": "°C"},
        "hourly": {
            "time": [
                "2024-01-08T09:00",
                "2024-01-08T10:00",
                "2024-01-08T11:00",
                "2024-01-08T12:00",
                "2024-01-08T13:00",
            ],
            "temperature_2m": [5.0, 6.0, None, 8.0, 9.0],
        },
        "daily_units": {"time": "iso8601", "temperature_2m_max": "°C", "temperature_2m_min": "°C"},
        "daily": {
            "time": ["2024-01-06", "2024-01-07", "2024-01-08"],
            "temperature_2m_max": [10.0, 11.0, 12.0],
            "temperature_2m_min": [1.0, 2.0, 3.0],
        },
    }


NOW = dt.datetime(2024, 1, 8, 12, 30, tzinfo=ZoneInfo("Asia/Tokyo"))


class TestParsePayload(unittest.TestCase):
    def test_drops_future_hours_and_nulls(self):
        series = open_meteo_client.parse_open_meteo_payload(_make_payload(), now=NOW)
        self.assertEqual(series.hourly_temperatures, (5.0, 6.0, 8.0))
        self.assertEqual(series.hourly_times[-1], dt.datetime(2024, 1, 8, 12, 0, tzinfo=ZoneInfo("Asia/Tokyo")))
        self.assertEqual(series.timezone, "Asia/Tokyo")

    def test_daily_pairs_are_kept(self):
        series = open_meteo_client.parse_open_meteo_payload(_make_payload(), now=NOW)
        self.assertEqual(series.daily_max, (10.0, 11.0, 12.0))
        self.assertEqual(series.daily_min, (1.0, 2.0, 3.0))
        self.assertEqual(series.daily_dates[-1], dt.date(2024, 1, 8))

    def test_null_daily_entries_are_skipped(self):
        payload = _make_payload()
        payload["daily"]["temperature_2m_min"][0] = None
        series = open_meteo_client.parse_open_meteo_payload(payload, now=NOW)
        self.assertEqual(series.daily_max, (11.0, 12.0))
        self.assertEqual(series.daily_min, (2.0, 3.0))

    def test_now_in_other_timezone_is_compared_correctly(self):
        now_utc = NOW.astimezone(ZoneInfo("UTC"))
        series = open_meteo_client.parse_open_meteo_payload(_make_payload(), now=now_utc)
        self.assertEqual(series.hourly_temperatures[-1], 8.0)

    def test_short_daily_time_raises(self):
        payload = _make_payload()
        payload["daily"]["time"] = payload["daily"]["time"][:1]
        with self.assertRaises(WeatherFetchError):
            open_meteo_client.parse_open_meteo_payload(payload, now=NOW)

    def test_mismatched_daily_max_min_raises(self):
        payload = _make_payload()
        payload["daily"]["temperature_2m_min"] = [1.0, 2.0]
        with self.assertRaises(WeatherFetchError):
            open_meteo_client.parse_open_meteo_payload(payload, now=NOW)

    def test_daily_without_time_keeps_all_pairs(self):
        payload = _make_payload()
        del payload["daily"]["time"]
        series = open_meteo_client.parse_open_meteo_payload(payload, now=NOW)
        self.assertEqual(series.daily_max, (10.0, 11.0, 12.0))
        self.assertIsNone(series.daily_dates)

    def test_missing_daily_block_raises(self):
        payload = _make_payload()
        del payload["daily"]
        with self.assertRaises(WeatherFetchError):
            open_meteo_client.parse_open_meteo_payload(payload, now=NOW)

    def test_unexpected_unit_logs_warning(self):
        payload = _make_payload()
        payload["hourly_units"]["temperature_2m"] = "°F"
        with self.assertLogs(open_meteo_client.logger.logger, level="WARNING"):
            open_meteo_client.parse_open_meteo_payload(payload, now=NOW)


class TestFetchTemperatureSeries(unittest.TestCase):
    def setUp(self):
        self._orig_session = open_meteo_client.session

    def tearDown(self):
        open_meteo_client.session = self._orig_session

    def test_fetch_requests_lookback_window(self):
        payload = _make_payload()
        captured = {}

        def fake_get(*_args, **kwargs):
            captured.update(kwargs["params"])
            return DummyResp(payload)

        open_meteo_client.session = type("S", (), {"get": staticmethod(fake_get)})()

        series = open_meteo_client.fetch_temperature_series(35.68, 139.65, lookback_days=7, now=NOW)

        self.assertEqual(captured["start_date"], "2024-01-01")
        self.assertEqual(captured["end_date"], "2024-01-08")
        self.assertEqual(captured["hourly"], "temperature_2m")
        self.assertEqual(captured["daily"], "temperature_2m_max,temperature_2m_min")
        self.assertEqual(captured["timezone"], "Asia/Tokyo")
        self.assertEqual(series.hourly_temperatures[-1], 8.0)

    def test_http_error_maps_to_fetch_error(self):
        error = requests.HTTPError("500 Server Error")
        open_meteo_client.session = type("S", (), {"get": lambda *a, **k: DummyResp({}, error)})()

        with self.assertRaises(WeatherFetchError):
            open_meteo_client.fetch_temperature_series(0, 0, now=NOW)

    def test_connection_error_maps_to_fetch_error(self):
        def boom(*_args, **_kwargs):
            raise requests.ConnectionError("offline")

        open_meteo_client.session = type("S", (), {"get": staticmethod(boom)})()

        with self.assertRaises(WeatherFetchError):
            open_meteo_client.fetch_temperature_series(0, 0, now=NOW)


if __name__ == "__main__":
    unittest.main()
