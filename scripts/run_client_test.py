#!/usr/bin/env python3
"""API client integration test for the DORA assessment server.

Drives the questionnaire as a pure HTTP client against a live server:
creates sessions, answers with random maturity levels, leaves random
observations, saves a draft halfway and resumes it in a fresh session, then
submits and cross-checks the server's category scores against the answers
that were sent.

Profiles are the combinations of language (es/pt) and flow ("straight" runs
the questionnaire in one session, "resume" goes through a draft).

Usage::

    # Install deps (first time only)
    uv pip install httpx rich

    # Quick smoke test (1 run per profile)
    uv run python scripts/run_client_test.py -n 1 -v

    # Spanish only, reproducible
    uv run python scripts/run_client_test.py --language es --seed 42
"""

from __future__ import annotations

import argparse
import asyncio
import random
import sys
import time
import uuid
from dataclasses import dataclass, field
from typing import Any

import httpx
from rich.console import Console
from rich.table import Table

LANGUAGES = ["es", "pt"]
FLOWS = ["straight", "resume"]

# Probability of attaching an observation to a question
OBSERVATION_RATE = 0.3
# Probability of skipping a question (moving on without answering)
SKIP_RATE = 0.1

OBSERVATION_POOL = {
    "es": ["Pendiente de auditoría", "Ver anexo contractual", "En revisión"],
    "pt": ["Pendente de auditoria", "Ver anexo contratual", "Em revisão"],
}


@dataclass
class Profile:
    language: str
    flow: str

    @property
    def label(self) -> str:
        return f"{self.language} / {self.flow}"


@dataclass
class SessionResult:
    """Outcome of one scripted session."""

    profile: Profile
    run_index: int
    status: str = "incomplete"   # "success" | "failed" | "incomplete"
    steps_taken: int = 0
    answered: int = 0
    delivered: bool | None = None
    error: str | None = None
    answers: dict[str, float] = field(default_factory=dict)


# ---------------------------------------------------------------------------
# APIClient — thin httpx wrapper with X-User-ID header
# ---------------------------------------------------------------------------

class APIClient:
    """Async HTTP client for the DORA assessment API."""

    def __init__(self, base_url: str, timeout: float = 30.0):
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> APIClient:
        self._client = httpx.AsyncClient(base_url=self._base_url, timeout=self._timeout)
        return self

    async def __aexit__(self, *args: Any) -> None:
        if self._client:
            await self._client.aclose()

    async def health_check(self) -> bool:
        try:
            resp = await self._client.get("/health")  # type: ignore[union-attr]
            return resp.status_code == 200 and resp.json().get("status") == "ok"
        except (httpx.ConnectError, httpx.TimeoutException):
            return False

    async def create_session(
        self, user_id: str, session_id: str, language: str, *, resume: bool,
    ) -> dict:
        return await self._request("POST", "/api/v1/sessions", user_id, json={
            "session_id": session_id,
            "user_name": f"tester-{user_id[:8]}",
            "provider_name": "CloudCo",
            "financial_entity_name": "BancoX",
            "language": language,
            "resume": resume,
        })

    async def answer(self, user_id: str, session_id: str, value: float) -> dict:
        return await self._request(
            "POST", f"/api/v1/sessions/{session_id}/answer", user_id, json={"value": value},
        )

    async def observe(self, user_id: str, session_id: str, text: str) -> dict:
        return await self._request(
            "POST", f"/api/v1/sessions/{session_id}/observation", user_id, json={"text": text},
        )

    async def next(self, user_id: str, session_id: str) -> dict:
        return await self._request("POST", f"/api/v1/sessions/{session_id}/next", user_id)

    async def save_draft(self, user_id: str, session_id: str) -> dict:
        return await self._request("POST", f"/api/v1/sessions/{session_id}/draft", user_id)

    async def abandon(self, user_id: str, session_id: str) -> None:
        await self._request("DELETE", f"/api/v1/sessions/{session_id}", user_id)

    async def scores(self, user_id: str, session_id: str) -> list[dict]:
        return await self._request("GET", f"/api/v1/sessions/{session_id}/scores", user_id)

    async def submit(self, user_id: str, session_id: str) -> dict:
        return await self._request("POST", f"/api/v1/sessions/{session_id}/submit", user_id)

    async def _request(self, method: str, path: str, user_id: str, json: Any = None) -> Any:
        """Send with X-User-ID header, retry once on timeout."""
        headers = {"X-User-ID": user_id}
        try:
            resp = await self._client.request(method, path, headers=headers, json=json)  # type: ignore[union-attr]
        except httpx.TimeoutException:
            resp = await self._client.request(method, path, headers=headers, json=json)  # type: ignore[union-attr]
        resp.raise_for_status()
        return resp.json() if resp.content else None


# ---------------------------------------------------------------------------
# SessionRunner — one scripted walk through the questionnaire
# ---------------------------------------------------------------------------

class SessionRunner:

    def __init__(self, client: APIClient, rng: random.Random, console: Console, verbosity: int = 0):
        self._client = client
        self._rng = rng
        self._console = console
        self._verbosity = verbosity

    async def run(self, profile: Profile, run_index: int) -> SessionResult:
        result = SessionResult(profile=profile, run_index=run_index)
        user_id = str(uuid.uuid4())
        session_id = f"run-{run_index}"
        try:
            body = await self._client.create_session(
                user_id, session_id, profile.language, resume=False,
            )
            step = body["step"]
            if step["type"] != "question":
                raise AssertionError(f"expected a question step, got {step['type']}")

            draft_at = step["total"] // 2 if profile.flow == "resume" else None

            while True:
                result.steps_taken += 1
                if draft_at is not None and step["position"] == draft_at:
                    step, session_id = await self._resume(user_id, session_id, step, profile)
                    draft_at = None

                if self._rng.random() < OBSERVATION_RATE:
                    text = self._rng.choice(OBSERVATION_POOL[profile.language])
                    step = await self._client.observe(user_id, session_id, text)

                last = step["available_action"] == "submit"
                if self._rng.random() < SKIP_RATE and not last:
                    step = await self._client.next(user_id, session_id)
                    continue

                value = self._rng.choice(step["options"])["value"]
                qid = step["qid"]
                step = await self._client.answer(user_id, session_id, value)
                result.answers[qid] = value
                if self._verbosity:
                    self._console.print(f"    [dim]{qid}[/] = {value:g}")
                if last:
                    break

            await self._check_scores(user_id, session_id, result.answers)

            outcome = await self._client.submit(user_id, session_id)
            if outcome["type"] != "completed":
                raise AssertionError(f"submit returned {outcome['type']}: {outcome.get('error')}")
            if outcome["payload"]["answers"] != result.answers:
                raise AssertionError("submitted answers differ from the answers sent")
            result.delivered = outcome["delivered"]
            result.answered = len(result.answers)
            result.status = "success"
        except (httpx.HTTPError, AssertionError, KeyError) as exc:
            result.status = "failed"
            result.error = f"{exc.__class__.__name__}: {exc}"
        return result

    async def _resume(self, user_id: str, session_id: str, step: dict, profile: Profile):
        draft = await self._client.save_draft(user_id, session_id)
        await self._client.abandon(user_id, session_id)
        new_id = f"{session_id}-resumed"
        body = await self._client.create_session(user_id, new_id, profile.language, resume=True)
        if not body["session"]["resumed"]:
            raise AssertionError("draft was not picked up on resume")
        resumed = body["step"]
        if resumed["position"] != draft["last_question_index"] or resumed["qid"] != step["qid"]:
            raise AssertionError(
                f"resumed at {resumed['qid']}, expected {step['qid']}"
            )
        if self._verbosity:
            self._console.print(f"    [dim]resumed at {resumed['qid']}[/]")
        return resumed, new_id

    async def _check_scores(self, user_id: str, session_id: str, answers: dict[str, float]) -> None:
        """Every category with answers must report their mean; others null."""
        scores = await self._client.scores(user_id, session_id)
        for entry in scores:
            prefix = entry["category_id"] + "_"
            values = [v for qid, v in answers.items() if qid.startswith(prefix)]
            expected = sum(values) / len(values) if values else None
            if expected is None:
                if entry["score"] is not None:
                    raise AssertionError(f"{entry['category_id']}: expected no data")
            elif abs(entry["score"] - expected) > 1e-9:
                raise AssertionError(
                    f"{entry['category_id']}: score {entry['score']} != {expected}"
                )


# ---------------------------------------------------------------------------
# Summary
# ---------------------------------------------------------------------------

def print_summary(console: Console, results: list[SessionResult]) -> None:
    console.print()
    console.rule("[bold]Session Summary")
    passed = sum(1 for r in results if r.status == "success")
    console.print(f"  Total:   {len(results)}")
    console.print(f"  [green]Passed:[/]  {passed}")
    console.print(f"  [red]Failed:[/]  {len(results) - passed}")
    console.print()

    table = Table(title="Results by Profile", show_lines=True)
    table.add_column("#", style="dim", width=4)
    table.add_column("Profile", min_width=16)
    table.add_column("Run", width=4)
    table.add_column("Status", width=8)
    table.add_column("Steps", width=6)
    table.add_column("Answered", width=9)
    table.add_column("Delivered", width=10)

    for i, r in enumerate(results, 1):
        status = {"success": "[green]OK[/]", "failed": "[red]FAIL[/]"}.get(r.status, r.status)
        delivered = "-" if r.delivered is None else ("yes" if r.delivered else "no")
        table.add_row(
            str(i), r.profile.label, str(r.run_index), status,
            str(r.steps_taken), str(r.answered), delivered,
        )
    console.print(table)

    for r in results:
        if r.status == "failed":
            console.print(f"  [red]{r.profile.label} (run {r.run_index}):[/] {r.error}")


# ---------------------------------------------------------------------------
# CLI + async main
# ---------------------------------------------------------------------------

def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="API client integration test for the DORA assessment server.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("--base-url", default="http://localhost:8080",
                        help="Server base URL (default: http://localhost:8080)")
    parser.add_argument("-n", "--runs", type=int, default=3,
                        help="Number of random runs per profile (default: 3)")
    parser.add_argument("-v", "--verbose", action="count", default=0,
                        help="Print every answer sent")
    parser.add_argument("--seed", type=int, default=None,
                        help="RNG seed for reproducibility (default: current timestamp)")
    parser.add_argument("--language", choices=LANGUAGES, default=None,
                        help="Only run one language (default: both)")
    parser.add_argument("--timeout", type=float, default=30.0,
                        help="HTTP request timeout in seconds (default: 30)")
    return parser.parse_args()


async def main() -> None:
    args = parse_args()
    console = Console()

    seed = args.seed if args.seed is not None else int(time.time())
    rng = random.Random(seed)
    console.print(f"[dim]RNG seed: {seed}[/]")

    languages = [args.language] if args.language else LANGUAGES
    profiles = [Profile(language=lang, flow=flow) for lang in languages for flow in FLOWS]

    results: list[SessionResult] = []
    async with APIClient(args.base_url, timeout=args.timeout) as client:
        if not await client.health_check():
            console.print(f"[red]Server at {args.base_url} is not healthy. Is it running?[/]")
            sys.exit(1)
        console.print(f"[green]Server health check passed[/] ({args.base_url})")

        runner = SessionRunner(client, rng, console, verbosity=args.verbose)
        for profile in profiles:
            for run_idx in range(1, args.runs + 1):
                console.print(f"[bold]{profile.label}[/] run {run_idx}/{args.runs}")
                results.append(await runner.run(profile, run_idx))

    print_summary(console, results)
    if any(r.status == "failed" for r in results):
        sys.exit(1)


if __name__ == "__main__":
    asyncio.run(main())
