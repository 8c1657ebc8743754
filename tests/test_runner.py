import asyncio
import time
import unittest
from unittest.mock import patch

from quizsolver.config import Settings
from quizsolver.normalizer import APOLOGY_ANSWER, NO_EXPLANATION
from quizsolver.providers import Provider, ProviderStatusError, RawResult
from quizsolver.runner import (
    FallbackResolver,
    build_resolver,
    configure,
    default_resolver,
    provider_status,
    resolve,
    solve_question,
)


class FakeProvider(Provider):
    def __init__(self, name, text=None, error=None, hang=False, available=True, split_lines=True):
        self.key = name.lower()
        self.name = name
        self.split_lines = split_lines
        self._text = text
        self._error = error
        self._hang = hang
        self._available = available
        self.calls = 0

    @property
    def available(self):
        return self._available

    async def invoke(self, question, timeout=None):
        self.calls += 1
        if self._hang:
            await asyncio.Event().wait()
        if self._error is not None:
            raise self._error
        return RawResult(text=self._text, elapsed_ms=42)


class TestFallbackResolver(unittest.IsolatedAsyncioTestCase):
    async def test_first_success_wins_and_later_providers_are_not_called(self):
        first = FakeProvider("First", error=ProviderStatusError("First", 503))
        second = FakeProvider("Second", text="Paris\nFrance's capital city.")
        third = FakeProvider("Third", text="London")

        response = await FallbackResolver([first, second, third]).resolve("Capital of France?")

        self.assertEqual(response.source, "Second")
        self.assertEqual(response.answer, "Paris")
        self.assertEqual(response.explanation, "France's capital city.")
        self.assertEqual(response.time_taken, 42)
        self.assertEqual(first.calls, 1)
        self.assertEqual(second.calls, 1)
        self.assertEqual(third.calls, 0)

    async def test_unavailable_provider_is_skipped_without_invoking(self):
        locked = FakeProvider("Locked", text="never", available=False)
        open_ = FakeProvider("Open", text="42")

        resolution = await FallbackResolver([locked, open_]).resolve_detailed("q")

        self.assertEqual(locked.calls, 0)
        self.assertEqual(resolution.response.source, "Open")
        self.assertTrue(resolution.attempts[0].skipped)
        self.assertTrue(resolution.attempts[1].succeeded)

    async def test_all_failures_return_sentinel(self):
        providers = [
            FakeProvider("A", error=ProviderStatusError("A", 500)),
            FakeProvider("B", available=False),
            FakeProvider("C", error=RuntimeError("unexpected")),
        ]

        resolution = await FallbackResolver(providers).resolve_detailed("q")

        self.assertEqual(resolution.response.source, "none")
        self.assertEqual(resolution.response.time_taken, 0)
        self.assertEqual(resolution.response.answer, APOLOGY_ANSWER)
        self.assertEqual(len(resolution.attempts), 3)
        self.assertFalse(any(attempt.succeeded for attempt in resolution.attempts))

    async def test_no_providers_returns_sentinel(self):
        response = await FallbackResolver([]).resolve("q")
        self.assertEqual(response.source, "none")

    async def test_blank_text_falls_through_to_next_provider(self):
        blank = FakeProvider("Blank", text="   ")
        good = FakeProvider("Good", text="Yes")

        response = await FallbackResolver([blank, good]).resolve("q")

        self.assertEqual(response.source, "Good")

    async def test_hanging_provider_times_out_and_next_one_answers(self):
        stuck = FakeProvider("Stuck", hang=True)
        backup = FakeProvider("Backup", text="Answer")
        resolver = FallbackResolver([stuck, backup], timeout_ms=50)

        start = time.perf_counter()
        resolution = await resolver.resolve_detailed("q")
        elapsed = time.perf_counter() - start

        self.assertLess(elapsed, 2.0)
        self.assertEqual(resolution.response.source, "Backup")
        self.assertTrue(resolution.attempts[0].timed_out)

    async def test_single_line_provider_keeps_whole_text(self):
        provider = FakeProvider("Free", text="Paris\nis the capital", split_lines=False)

        response = await FallbackResolver([provider]).resolve("q")

        self.assertEqual(response.answer, "Paris\nis the capital")
        self.assertEqual(response.explanation, NO_EXPLANATION)


class TestResolverWiring(unittest.IsolatedAsyncioTestCase):
    def _settings(self, **overrides):
        values = {
            "credentials": {"groq": "g"},
            "endpoints": {},
            "order": ("groq", "openai", "freellm"),
            "timeout_ms": 500,
        }
        values.update(overrides)
        return Settings(**values)

    def test_build_resolver_follows_configured_order(self):
        resolver = build_resolver(self._settings())

        self.assertEqual([p.name for p in resolver.providers], ["Groq", "OpenAI", "FreeLLM"])
        self.assertEqual([p.available for p in resolver.providers], [True, False, True])
        self.assertEqual(resolver.timeout_ms, 500)

    def test_build_resolver_applies_endpoint_override(self):
        resolver = build_resolver(self._settings(endpoints={"freellm": "https://free.example"}))
        self.assertEqual(resolver.providers[2].endpoint, "https://free.example")

    def test_provider_status_reports_keys(self):
        status = provider_status(self._settings())
        self.assertEqual(status["Groq"], {"available": True, "requires_key": True})
        self.assertEqual(status["OpenAI"], {"available": False, "requires_key": True})
        self.assertEqual(status["FreeLLM"], {"available": True, "requires_key": False})

    async def test_solve_question_returns_legacy_shape(self):
        settings = self._settings(credentials={}, order=("openai",))
        result = await solve_question("q", settings)
        self.assertEqual(result.answer, APOLOGY_ANSWER)
        self.assertEqual(result.confidence, 0.0)

    async def test_resolve_never_raises_on_network_failure(self):
        settings = self._settings()

        async def broken_invoke(self, question, timeout=None):
            raise ProviderStatusError(self.name, 502)

        with patch("quizsolver.providers.base.HTTPProvider.invoke", broken_invoke):
            response = await resolve("q", settings)

        self.assertEqual(response.source, "none")

    async def test_unknown_provider_name_is_ignored(self):
        settings = self._settings(order=("bogus", "openai"), credentials={})

        self.assertEqual([p.name for p in build_resolver(settings).providers], ["OpenAI"])
        self.assertEqual(list(provider_status(settings)), ["OpenAI"])
        response = await resolve("q", settings)
        self.assertEqual(response.source, "none")


class TestDefaultResolver(unittest.IsolatedAsyncioTestCase):
    def setUp(self):
        patcher = patch("quizsolver.runner._default_resolver", None)
        patcher.start()
        self.addCleanup(patcher.stop)

    async def test_settings_are_loaded_once(self):
        first = Settings(credentials={}, endpoints={}, order=("openai",), timeout_ms=100)
        second = Settings(credentials={"openai": "late-key"}, endpoints={}, order=("openai",), timeout_ms=100)

        with patch("quizsolver.runner.load_settings", side_effect=[first, second]) as loader:
            await resolve("q")
            response = await resolve("q")

        self.assertEqual(loader.call_count, 1)
        self.assertEqual(response.source, "none")
        self.assertFalse(default_resolver().providers[0].available)

    async def test_configure_replaces_default_resolver(self):
        settings = Settings(credentials={}, endpoints={}, order=("groq", "openai"), timeout_ms=100)

        with patch("quizsolver.runner.load_settings") as loader:
            resolver = configure(settings)
            self.assertIs(default_resolver(), resolver)
            await resolve("q")

        loader.assert_not_called()
        self.assertEqual([p.name for p in resolver.providers], ["Groq", "OpenAI"])


if __name__ == "__main__":
    unittest.main()
