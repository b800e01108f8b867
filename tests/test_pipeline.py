"""
Tests for file-to-package resolution.

Covers narrowest/widest selection over real snapshots, classification of
failures (cancellation, no package, analysis errors, consistency faults),
and the metadata-only query.
"""

import pytest

from unitresolve import bug
from unitresolve.cache import (
    Metadata,
    MemorySnapshot,
    Package,
    PackageID,
    PackagePath,
    PackageName,
    ParseMode,
    new_intermediate_test_variant,
    parse_file,
)
from unitresolve.context import Canceled, ContextError, background, with_cancel
from unitresolve.exceptions import AnalysisError, InternalConsistencyError, NoPackageError
from unitresolve.resolution import (
    Policy,
    narrowest_metadata_for_file,
    narrowest_package_for_file,
    select_package_for_file,
    widest_package_for_file,
)


class StubSnapshot:
    """Snapshot with scripted metadata and type-check results."""

    def __init__(self, metas, packages=None, type_check_error=None, metadata_error=None):
        self.metas = metas
        self.packages = packages
        self.type_check_error = type_check_error
        self.metadata_error = metadata_error
        self.type_checked = []

    def metadata_for_file(self, ctx, uri):
        if self.metadata_error is not None:
            raise self.metadata_error
        return self.metas

    def type_check(self, ctx, *ids):
        self.type_checked.extend(ids)
        if self.type_check_error is not None:
            raise self.type_check_error
        return self.packages


def _md(id, files):
    return Metadata(
        id=PackageID(id),
        pkg_path=PackagePath(id),
        name=PackageName("p"),
        compiled_go_files=files,
    )


URI = "file:///src/p/a.go"


class TestScenarioA:
    """Regular package, ITV and test variant all enclose the file"""

    def test_narrowest_selects_regular_package(self, scenario_a):
        snapshot, uri, p, _, _ = scenario_a

        pkg, pgf = narrowest_package_for_file(background(), snapshot, uri)

        assert pkg.id == p.id
        assert pgf.uri == uri
        assert pgf.package_name == "p"
        assert pgf.find_decl("A") is not None

    def test_widest_selects_test_variant(self, scenario_a):
        snapshot, uri, _, _, p_test = scenario_a

        pkg, pgf = widest_package_for_file(background(), snapshot, uri)

        assert pkg.id == p_test.id
        assert len(pkg.compiled_go_files()) == 3
        assert pgf is pkg.file(uri)

    def test_metadata_only_selects_regular_package(self, scenario_a):
        snapshot, uri, p, _, _ = scenario_a

        md = narrowest_metadata_for_file(background(), snapshot, uri)

        assert md.id == p.id

    def test_itv_is_never_type_checked(self, scenario_a):
        snapshot, uri, _, p_itv, _ = scenario_a
        spy = StubSnapshot(snapshot.metadata_for_file(background(), uri), type_check_error=AnalysisError("x", "stop"))

        for resolve in (narrowest_package_for_file, widest_package_for_file):
            with pytest.raises(AnalysisError):
                resolve(background(), spy, uri)

        assert p_itv.id not in spy.type_checked

    def test_test_only_file_resolves_to_test_variant_both_ways(self, scenario_a):
        snapshot, _, _, _, p_test = scenario_a
        test_uri = p_test.compiled_go_files[-1]

        narrow, _ = narrowest_package_for_file(background(), snapshot, test_uri)
        wide, _ = widest_package_for_file(background(), snapshot, test_uri)

        assert narrow.id == wide.id == p_test.id


class TestScenarioB:
    """File enclosed only by an intermediate test variant"""

    @pytest.fixture
    def itv_only(self, temp_workspace):
        uri = temp_workspace.write("p/a.go", "package p\n")
        p = _md("example.com/p", [uri])
        itv = new_intermediate_test_variant(p, PackagePath("example.com/q"))
        return MemorySnapshot([itv]), uri

    @pytest.mark.parametrize("resolve", [narrowest_package_for_file, widest_package_for_file])
    def test_resolution_raises_no_package(self, itv_only, resolve):
        snapshot, uri = itv_only

        with pytest.raises(NoPackageError) as exc_info:
            resolve(background(), snapshot, uri)

        assert exc_info.value.uri == uri

    def test_metadata_only_raises_no_package(self, itv_only):
        snapshot, uri = itv_only

        with pytest.raises(NoPackageError):
            narrowest_metadata_for_file(background(), snapshot, uri)

    def test_untracked_file_raises_no_package(self, itv_only):
        snapshot, _ = itv_only

        with pytest.raises(NoPackageError) as exc_info:
            narrowest_package_for_file(background(), snapshot, "file:///nowhere/x.go")

        assert exc_info.value.policy is Policy.NARROWEST


class TestErrorClassification:
    """Errors keep their identity on the way out"""

    def test_cancellation_from_metadata_lookup_propagates_verbatim(self):
        err = Canceled()
        snapshot = StubSnapshot([], metadata_error=err)

        with pytest.raises(Canceled) as exc_info:
            narrowest_package_for_file(background(), snapshot, URI)

        assert exc_info.value is err
        assert not isinstance(exc_info.value, (NoPackageError, AnalysisError))
        assert snapshot.type_checked == []

    def test_canceled_context_against_memory_snapshot(self, scenario_a):
        snapshot, uri, _, _, _ = scenario_a
        ctx, cancel = with_cancel(background())
        cancel()

        for resolve in (narrowest_package_for_file, widest_package_for_file, narrowest_metadata_for_file):
            with pytest.raises(ContextError) as exc_info:
                resolve(ctx, snapshot, uri)
            assert exc_info.value is ctx.err()

    def test_analysis_error_passes_through(self):
        err = AnalysisError("p", "undefined: x")
        snapshot = StubSnapshot([_md("p", [URI])], type_check_error=err)

        with pytest.raises(AnalysisError) as exc_info:
            widest_package_for_file(background(), snapshot, URI)

        assert exc_info.value is err

    def test_cancellation_during_type_check_propagates(self):
        err = Canceled()
        snapshot = StubSnapshot([_md("p", [URI])], type_check_error=err)

        with pytest.raises(Canceled) as exc_info:
            narrowest_package_for_file(background(), snapshot, URI)

        assert exc_info.value is err

    def test_missing_member_file_is_a_consistency_fault(self):
        md = _md("p", [URI])
        other = parse_file("file:///src/p/other.go", b"package p\n", ParseMode.FULL)
        snapshot = StubSnapshot([md], packages=[Package(md, [other])])

        with pytest.raises(InternalConsistencyError) as exc_info:
            narrowest_package_for_file(background(), snapshot, URI)

        assert not isinstance(exc_info.value, NoPackageError)
        assert exc_info.value.package_id == "p"
        assert exc_info.value.policy is Policy.NARROWEST
        bugs = bug.list_bugs()
        assert len(bugs) == 1
        assert bugs[0].data["uri"] == URI

    def test_empty_type_check_result_is_a_consistency_fault(self):
        snapshot = StubSnapshot([_md("p", [URI])], packages=[])

        with pytest.raises(InternalConsistencyError):
            widest_package_for_file(background(), snapshot, URI)

        assert len(bug.list_bugs()) == 1

    def test_any_file_lookup_failure_is_a_consistency_fault(self):
        md = _md("p", [URI])

        class BrokenPackage(Package):
            def file(self, uri):
                raise KeyError(uri)

        snapshot = StubSnapshot([md], packages=[BrokenPackage(md, [])])

        with pytest.raises(InternalConsistencyError) as exc_info:
            narrowest_package_for_file(background(), snapshot, URI)

        assert isinstance(exc_info.value.cause, KeyError)
        assert len(bug.list_bugs()) == 1

    def test_context_error_from_file_lookup_is_not_a_fault(self):
        md = _md("p", [URI])
        err = Canceled()

        class CancelingPackage(Package):
            def file(self, uri):
                raise err

        snapshot = StubSnapshot([md], packages=[CancelingPackage(md, [])])

        with pytest.raises(Canceled) as exc_info:
            narrowest_package_for_file(background(), snapshot, URI)

        assert exc_info.value is err
        assert bug.list_bugs() == []


class TestTypeCheckResults:
    def test_first_package_is_used(self):
        md = _md("p", [URI])
        first = Package(md, [parse_file(URI, b"package p\n")])
        second = Package(md, [parse_file(URI, b"package p\n")])
        snapshot = StubSnapshot([md], packages=[first, second])

        pkg, pgf = select_package_for_file(background(), snapshot, URI, Policy.WIDEST)

        assert pkg is first
        assert pgf is first.file(URI)

    def test_only_selected_package_is_type_checked(self):
        narrow = _md("p", [URI])
        wide = _md("p.test", [URI, "file:///src/p/a_test.go"])
        snapshot = StubSnapshot([narrow, wide], packages=[Package(wide, [parse_file(URI, b"package p\n")])])

        widest_package_for_file(background(), snapshot, URI)

        assert snapshot.type_checked == ["p.test"]

    def test_metadata_only_never_type_checks(self):
        snapshot = StubSnapshot([_md("p", [URI])], type_check_error=AssertionError("must not type-check"))

        md = narrowest_metadata_for_file(background(), snapshot, URI)

        assert md.id == "p"
        assert snapshot.type_checked == []

    def test_snapshot_candidate_list_is_not_mutated(self, scenario_a):
        snapshot, uri, _, p_itv, _ = scenario_a
        metas = snapshot.metadata_for_file(background(), uri)
        spy = StubSnapshot(metas)

        narrowest_metadata_for_file(background(), spy, uri)

        assert p_itv in spy.metas
        assert len(spy.metas) == 3
