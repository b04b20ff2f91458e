"""
Test cases for the call graph walker
"""

import pytest

from callchain.graph.models import (
    CreationAnnotation, CycleHit, DependencyAnnotation, EdgeKind, EnterNode, MemberKind,
    Terminal, TerminalReason, WalkerOptions
)
from callchain.graph.noise import NoiseFilter
from callchain.graph.walker import CallGraphWalker

from .conftest import build_provider, method_of


def walk(sources, type_name, method_name, **options):
    provider = build_provider(sources)
    walker = CallGraphWalker(provider, options=WalkerOptions(**options))
    return walker.walk(method_of(provider, type_name, method_name))


class TestScenarios:
    """Empty body, mutual recursion, creation and field dependency"""

    def test_empty_body_emits_single_node(self):
        result = walk({"app.py": '''
            class HomeController:
                def index(self):
                    pass
        '''}, "HomeController", "index")

        assert result.events == [EnterNode(signature="HomeController.index", depth=0)]

    def test_mutual_recursion_stops_at_cycle(self):
        result = walk({"app.py": '''
            class LoopController:
                def ping(self):
                    self.pong()

                def pong(self):
                    self.ping()
        '''}, "LoopController", "ping")

        assert result.events == [
            EnterNode(signature="LoopController.ping", depth=0),
            EnterNode(signature="LoopController.pong", depth=1),
            CycleHit(signature="LoopController.ping", depth=2),
        ]

    def test_object_creation_annotates_and_enters_constructor(self):
        result = walk({"app.py": '''
            class Widget:
                def __init__(self):
                    pass


            class ShopController:
                def build(self):
                    Widget()
        '''}, "ShopController", "build")

        assert result.events == [
            EnterNode(signature="ShopController.build", depth=0),
            CreationAnnotation(type_name="Widget", depth=0),
            EnterNode(signature="Widget.__init__", depth=1),
        ]
        assert [e.kind for e in result.edges] == [EdgeKind.OBJECT_CREATION]

    def test_field_dependency_is_annotated_and_followed(self):
        result = walk({"app.py": '''
            class MailService:
                def send(self):
                    pass


            class SignupController:
                def __init__(self, mailer: MailService):
                    self._mailer = mailer

                def register(self):
                    self._mailer.send()
        '''}, "SignupController", "register")

        assert result.events == [
            EnterNode(signature="SignupController.register", depth=0),
            EnterNode(signature="MailService.send", depth=1),
            DependencyAnnotation(member_type="MailService", depth=0, member_kind=MemberKind.FIELD,
                                 member_name="_mailer"),
            CycleHit(signature="MailService.send", depth=1),
        ]
        assert [e.kind for e in result.edges] == [
            EdgeKind.DIRECT_INVOCATION, EdgeKind.DEPENDENCY_INVOCATION
        ]

    def test_field_declared_in_init_and_class_body_is_reported_once(self):
        result = walk({"app.py": '''
            class JobService:
                def run(self):
                    pass


            class JobController:
                def __init__(self, svc: JobService):
                    self.svc = svc

                svc: JobService

                def go(self):
                    self.svc.run()
        '''}, "JobController", "go")

        assert result.events == [
            EnterNode(signature="JobController.go", depth=0),
            EnterNode(signature="JobService.run", depth=1),
            DependencyAnnotation(member_type="JobService", depth=0, member_kind=MemberKind.FIELD,
                                 member_name="svc"),
            CycleHit(signature="JobService.run", depth=1),
        ]


class TestTraversalProperties:
    """Termination, at-most-once expansion, determinism and noise exclusion"""

    SOURCES = {"app.py": '''
        import os
        import json


        class Ledger:
            def __init__(self):
                self.entries = []

            def record(self, value):
                self.entries.append(value)
                self.record(value)

            def __eq__(self, other):
                return True


        class BillingController:
            def __init__(self, ledger: Ledger):
                self.ledger = ledger

            def charge(self, amount):
                print(amount)
                os.getcwd()
                json.dumps({"amount": amount})
                self.ledger.record(amount)
                self.ledger.__eq__(None)
                self.refund(amount)

            def refund(self, amount):
                self.charge(amount)
                helper = Ledger()
                helper.record(len(str(amount)))
    '''}

    def setup_method(self):
        self.provider = build_provider(self.SOURCES)
        self.entry = method_of(self.provider, "BillingController", "charge")

    def test_self_recursion_terminates(self):
        result = CallGraphWalker(self.provider).walk(self.entry)

        assert CycleHit(signature="Ledger.record", depth=2) in result.events
        assert len(result.visited) <= len({e.signature for e in result.events if hasattr(e, 'signature')})

    def test_each_key_expanded_at_most_once(self):
        result = CallGraphWalker(self.provider).walk(self.entry)

        assert len(result.expanded) == len(set(result.expanded))
        assert set(result.expanded) == set(result.visited)

    def test_repeated_runs_are_identical(self):
        first = CallGraphWalker(self.provider).walk(self.entry)
        fresh = build_provider(self.SOURCES)
        second = CallGraphWalker(fresh).walk(method_of(fresh, "BillingController", "charge"))

        assert [e.model_dump() for e in first.events] == [e.model_dump() for e in second.events]

    def test_noise_never_entered(self):
        result = CallGraphWalker(self.provider).walk(self.entry)
        signatures = result.signatures()

        assert not any(s.startswith(("builtins.", "os.", "json.")) for s in signatures)
        assert "Ledger.__eq__" not in signatures
        assert signatures[:3] == ["BillingController.charge", "Ledger.record", "BillingController.refund"]

    def test_stdlib_kept_when_disabled(self):
        noise = NoiseFilter(include_stdlib=False)
        result = CallGraphWalker(self.provider, noise_filter=noise).walk(self.entry)

        assert "os.getcwd" in result.signatures()
        assert Terminal(signature="os.getcwd", depth=1, reason=TerminalReason.UNAVAILABLE) in result.events


class TestPolicies:
    """Configurable traversal policies"""

    DIAMOND = {"app.py": '''
        class DiamondController:
            def top(self):
                self.left()
                self.right()

            def left(self):
                self.shared()

            def right(self):
                self.shared()

            def shared(self):
                pass
    '''}

    CHAIN = {"app.py": '''
        class ChainController:
            def first(self):
                self.second()

            def second(self):
                self.third()

            def third(self):
                pass
    '''}

    def test_diamond_truncated_like_cycle(self):
        result = walk(self.DIAMOND, "DiamondController", "top")

        assert result.events[-1] == CycleHit(signature="DiamondController.shared", depth=2)
        assert result.signatures().count("DiamondController.shared") == 1

    def test_repeated_paths_expanded_when_enabled(self):
        result = walk(self.DIAMOND, "DiamondController", "top", expand_repeated_paths=True)

        assert result.signatures() == [
            "DiamondController.top",
            "DiamondController.left",
            "DiamondController.shared",
            "DiamondController.right",
            "DiamondController.shared",
        ]
        assert not any(isinstance(e, CycleHit) for e in result.events)

    def test_repeated_paths_still_stop_true_cycles(self):
        result = walk({"app.py": '''
            class LoopController:
                def ping(self):
                    self.pong()

                def pong(self):
                    self.ping()
        '''}, "LoopController", "ping", expand_repeated_paths=True)

        assert result.events[-1] == CycleHit(signature="LoopController.ping", depth=2)

    def test_overload_aware_keys_include_parameters(self):
        result = walk({"app.py": '''
            class SearchController:
                def find(self, term, limit=10):
                    pass
        '''}, "SearchController", "find", overload_aware_keys=True)

        assert result.entry == "SearchController.find(term, limit)"

    def test_depth_cap_truncates(self):
        result = walk(self.CHAIN, "ChainController", "first", max_depth=1)

        assert result.events == [
            EnterNode(signature="ChainController.first", depth=0),
            EnterNode(signature="ChainController.second", depth=1),
            Terminal(signature="ChainController.second", depth=1, reason=TerminalReason.DEPTH_LIMIT),
        ]
        assert result.visited == ["ChainController.first"]

    def test_max_depth_is_validated(self):
        with pytest.raises(ValueError):
            WalkerOptions(max_depth=0)

    def test_repeated_path_expansion_documents_growth(self):
        description = WalkerOptions.model_fields["expand_repeated_paths"].description

        assert "exponentially" in description
        assert "max_depth" in description


class TestCancellationAndFaults:
    """Cancellation signal and per-node fault containment"""

    SOURCES = {"app.py": '''
        class Store:
            def load(self):
                pass


        class ReportController:
            def run(self):
                self.broken()
                self.fine()

            def broken(self):
                pass

            def fine(self):
                Store().load()
    '''}

    def setup_method(self):
        self.provider = build_provider(self.SOURCES)
        self.entry = method_of(self.provider, "ReportController", "run")

    def test_cancellation_returns_partial_events(self):
        checks = []

        def cancel():
            checks.append(1)
            return len(checks) >= 2

        result = CallGraphWalker(self.provider).walk(self.entry, cancel=cancel)

        assert result.cancelled
        assert result.events == [
            EnterNode(signature="ReportController.run", depth=0),
            Terminal(signature="ReportController.broken", depth=1, reason=TerminalReason.CANCELLED),
        ]

    def test_provider_fault_becomes_terminal(self, monkeypatch):
        original = self.provider.source_definition

        def flaky(symbol):
            if symbol.name == "broken":
                raise RuntimeError("index corrupted")
            return original(symbol)

        monkeypatch.setattr(self.provider, "source_definition", flaky)
        result = CallGraphWalker(self.provider).walk(self.entry)

        assert Terminal(signature="ReportController.broken", depth=1, reason=TerminalReason.PROVIDER_ERROR,
                        detail="index corrupted") in result.events
        assert "ReportController.fine" in result.signatures()
        assert "Store.load" in result.signatures()
        assert not result.cancelled

    def test_missing_semantic_scope_becomes_terminal(self, monkeypatch):
        original = self.provider.semantic_scope

        def no_scope(definition):
            if definition.symbol.name == "broken":
                return None
            return original(definition)

        monkeypatch.setattr(self.provider, "semantic_scope", no_scope)
        result = CallGraphWalker(self.provider).walk(self.entry)

        assert Terminal(signature="ReportController.broken", depth=1,
                        reason=TerminalReason.NO_SEMANTIC_MODEL) in result.events

    def test_synthesized_constructor_is_unavailable(self):
        result = CallGraphWalker(self.provider).walk(method_of(self.provider, "ReportController", "fine"))

        assert result.events[:4] == [
            EnterNode(signature="ReportController.fine", depth=0),
            EnterNode(signature="Store.load", depth=1),
            CreationAnnotation(type_name="Store", depth=0),
            EnterNode(signature="Store.__init__", depth=1),
        ]
        assert result.events[4] == Terminal(signature="Store.__init__", depth=1,
                                            reason=TerminalReason.UNAVAILABLE)
