from __future__ import annotations

import threading

import pytest

from contract.models import CandidateMatch, Position, SymbolReference
from resolve.engine import ImplementationResolver, resolve_implementations
from resolve.errors import FileLoadFailure, ReferenceLookupUnavailable
from resolve.session import (
    ManyImplementations,
    NoImplementations,
    NoReferences,
    SingleImplementation,
)

_DECLARATION = Position(line=3, column=11)


def _ref(file_id: str, line: int) -> SymbolReference:
    return SymbolReference(file_id=file_id, line=line, column=1)


def _lines(*lines: str) -> str:
    return "\n".join(lines) + "\n"


def _file_with_line(line: int, content: str) -> str:
    return "\n" * (line - 1) + content + "\n"


class FakeSupplier:
    def __init__(self, references: list[SymbolReference] | None) -> None:
        self.references = references
        self.calls: list[tuple[str, Position]] = []

    def find_references(
        self, file_id: str, position: Position
    ) -> list[SymbolReference] | None:
        self.calls.append((file_id, position))
        return self.references


class FailingSupplier:
    def find_references(
        self, file_id: str, position: Position
    ) -> list[SymbolReference] | None:
        raise RuntimeError("index offline")


class FakeLoader:
    def __init__(self, files: dict[str, str]) -> None:
        self.files = files
        self.loaded: list[str] = []

    def load_text(self, file_id: str) -> str:
        self.loaded.append(file_id)
        if file_id not in self.files:
            raise FileLoadFailure(file_id, "no such file")
        return self.files[file_id]


def test_scenario_single_implementation_navigates_directly() -> None:
    supplier = FakeSupplier([_ref("X", 10)])
    loader = FakeLoader({"X": _file_with_line(10, "class Dog implements Animal {")})

    outcome = resolve_implementations(
        supplier, loader, "Animal", "Animal.php", _DECLARATION
    )

    assert outcome == SingleImplementation(
        CandidateMatch(file_id="X", line=10, class_name="Dog")
    )
    assert supplier.calls == [("Animal.php", _DECLARATION)]


@pytest.mark.parametrize("references", [[], None])
def test_scenario_no_references(references: list[SymbolReference] | None) -> None:
    outcome = resolve_implementations(
        FakeSupplier(references), FakeLoader({}), "Animal", "Animal.php", _DECLARATION
    )

    assert outcome == NoReferences()


def test_scenario_many_implementations_in_first_classified_order() -> None:
    supplier = FakeSupplier([_ref("b.php", 2), _ref("a.php", 1)])
    loader = FakeLoader(
        {
            "a.php": _lines("class Cat implements Animal {}"),
            "b.php": _lines("<?php", "class Dog implements Animal {}"),
        }
    )

    outcome = resolve_implementations(
        supplier, loader, "Animal", "Animal.php", _DECLARATION
    )

    assert outcome == ManyImplementations(
        (
            CandidateMatch(file_id="b.php", line=2, class_name="Dog"),
            CandidateMatch(file_id="a.php", line=1, class_name="Cat"),
        )
    )


def test_scenario_comment_mention_is_not_an_implementation() -> None:
    supplier = FakeSupplier([_ref("notes.php", 1)])
    loader = FakeLoader({"notes.php": _lines("// implements Animal")})

    outcome = resolve_implementations(
        supplier, loader, "Animal", "Animal.php", _DECLARATION
    )

    assert outcome == NoImplementations()


def test_repeated_runs_are_deterministic() -> None:
    references = [_ref("a.php", 1), _ref("b.php", 1), _ref("c.php", 1)]
    files = {
        "a.php": _lines("class A implements Animal, Named {"),
        "b.php": _lines("function feed(Animal $a) {}"),
        "c.php": _lines("class C extends Base implements Animal"),
    }

    first = resolve_implementations(
        FakeSupplier(references), FakeLoader(files), "Animal", "i.php", _DECLARATION
    )
    second = resolve_implementations(
        FakeSupplier(references), FakeLoader(files), "Animal", "i.php", _DECLARATION
    )

    assert first == second
    assert isinstance(first, ManyImplementations)


def test_duplicate_sites_keep_first_class_name_and_stream_once() -> None:
    supplier = FakeSupplier([_ref("x.php", 1), _ref("x.php", 1)])
    loader = FakeLoader({"x.php": _lines("class Dog implements Animal {}")})
    streamed: list[CandidateMatch] = []

    outcome = resolve_implementations(
        supplier,
        loader,
        "Animal",
        "Animal.php",
        _DECLARATION,
        on_match_added=streamed.append,
    )

    assert streamed == [CandidateMatch(file_id="x.php", line=1, class_name="Dog")]
    assert outcome == SingleImplementation(streamed[0])


def test_method_narrowing_and_fallback() -> None:
    supplier = FakeSupplier([_ref("dog.php", 1), _ref("cat.php", 1)])
    loader = FakeLoader(
        {
            "dog.php": _lines(
                "class Dog implements Animal {",
                "    public function eat() {}",
                "    public function speak() {}",
                "}",
            ),
            "cat.php": _lines("class Cat implements Animal {", "}"),
        }
    )

    outcome = resolve_implementations(
        supplier,
        loader,
        "Animal",
        "Animal.php",
        _DECLARATION,
        method_name="speak",
    )

    assert isinstance(outcome, ManyImplementations)
    assert [(m.file_id, m.line) for m in outcome.matches] == [
        ("dog.php", 3),
        ("cat.php", 1),
    ]


def test_load_failure_skips_reference_and_keeps_scanning() -> None:
    supplier = FakeSupplier([_ref("gone.php", 1), _ref("dog.php", 1)])
    loader = FakeLoader({"dog.php": _lines("class Dog implements Animal {}")})

    outcome = resolve_implementations(
        supplier, loader, "Animal", "Animal.php", _DECLARATION
    )

    assert isinstance(outcome, SingleImplementation)
    assert loader.loaded == ["gone.php", "dog.php"]


def test_supplier_failure_is_reported_without_partial_results() -> None:
    resolver = ImplementationResolver(FailingSupplier(), FakeLoader({}))
    session = resolver.open_session("Animal")
    completed: list[object] = []

    with pytest.raises(ReferenceLookupUnavailable, match="index offline"):
        resolver.run(
            session, "Animal.php", _DECLARATION, on_scan_complete=completed.append
        )

    assert completed == []
    assert session.matches == ()


def test_scan_complete_fires_once_with_the_outcome() -> None:
    supplier = FakeSupplier([_ref("x.php", 1)])
    loader = FakeLoader({"x.php": _lines("class Dog implements Animal {}")})
    resolver = ImplementationResolver(supplier, loader)
    session = resolver.open_session("Animal")
    completed: list[object] = []

    outcome = resolver.run(
        session, "Animal.php", _DECLARATION, on_scan_complete=completed.append
    )

    assert completed == [outcome]


def test_cancellation_stops_unprocessed_references() -> None:
    references = [_ref(f"{name}.php", 1) for name in ("a", "b", "c")]
    loader = FakeLoader(
        {
            f"{name}.php": _lines(f"class {name.upper()} implements Animal {{}}")
            for name in ("a", "b", "c")
        }
    )
    resolver = ImplementationResolver(FakeSupplier(references), loader)
    session = resolver.open_session("Animal")
    completed: list[object] = []

    def on_match_added(match: CandidateMatch) -> None:
        session.dismiss()

    outcome = resolver.run(
        session,
        "Animal.php",
        _DECLARATION,
        on_match_added=on_match_added,
        on_scan_complete=completed.append,
    )

    assert session.cancelled is True
    assert loader.loaded == ["a.php"]
    assert outcome == SingleImplementation(
        CandidateMatch(file_id="a.php", line=1, class_name="A")
    )
    assert completed == [outcome]


class BlockingLoader(FakeLoader):
    """Blocks inside the first load until released."""

    def __init__(self, files: dict[str, str]) -> None:
        super().__init__(files)
        self.entered = threading.Event()
        self.release = threading.Event()

    def load_text(self, file_id: str) -> str:
        if not self.entered.is_set():
            self.entered.set()
            self.release.wait(timeout=5)
        return super().load_text(file_id)


def test_new_session_runs_while_old_session_is_blocked_and_cancelled() -> None:
    files = {
        "a.php": _lines("class A implements Animal {}"),
        "b.php": _lines("class B implements Animal {}"),
    }
    references = [_ref("a.php", 1), _ref("b.php", 1)]

    slow_loader = BlockingLoader(files)
    slow = ImplementationResolver(FakeSupplier(references), slow_loader)
    old_session = slow.open_session("Animal")
    old_result: list[object] = []
    worker = threading.Thread(
        target=lambda: old_result.append(
            slow.run(old_session, "Animal.php", _DECLARATION)
        )
    )
    worker.start()
    assert slow_loader.entered.wait(timeout=5)

    fast = ImplementationResolver(FakeSupplier(references), FakeLoader(files))
    new_session = fast.open_session("Animal")
    new_outcome = fast.run(new_session, "Animal.php", _DECLARATION)

    old_session.dismiss()
    slow_loader.release.set()
    worker.join(timeout=5)

    assert isinstance(new_outcome, ManyImplementations)
    assert new_session.cancelled is False
    # The in-flight reference finishes loading but may not append once cancelled.
    assert old_result == [NoImplementations()]
    assert old_session.matches == ()
    assert slow_loader.loaded == ["a.php"]
