"""
Package metadata: the static description of a compilation unit prior to
type-checking.
"""

from typing import List, NewType

from pydantic import BaseModel, ConfigDict, Field

from unitresolve.protocol import DocumentURI

PackageID = NewType("PackageID", str)
PackagePath = NewType("PackagePath", str)
PackageName = NewType("PackageName", str)
ImportPath = NewType("ImportPath", str)


class Metadata(BaseModel):
    """
    Describes one package as reported by the build system.

    A test variant has a non-empty for_test naming the package under test.
    An intermediate test variant (ITV) is a test variant built for some
    other package: it compiles exactly the same files as the regular
    package but resolves imports against the test build of for_test.
    ITVs carry no information of their own and are never type-checked
    for queries.
    """
    model_config = ConfigDict(frozen=True)

    id: PackageID
    pkg_path: PackagePath
    name: PackageName
    import_path: ImportPath = ImportPath("")
    compiled_go_files: List[DocumentURI] = Field(default_factory=list)
    for_test: PackagePath = PackagePath("")
    depends_on: List[PackageID] = Field(default_factory=list)

    def is_intermediate_test_variant(self) -> bool:
        # The external test package "p_test" is built for "p" but is not an ITV.
        return bool(self.for_test) and self.for_test != self.pkg_path and self.for_test + "_test" != self.pkg_path

    def contains(self, uri: DocumentURI) -> bool:
        return uri in self.compiled_go_files

    def __str__(self) -> str:
        return str(self.id)


def new_test_variant(md: Metadata, extra_files: List[DocumentURI]) -> Metadata:
    """
    Build the test variant of md: same package, plus its in-package
    test files, ID ``"<pkg> [<pkg>.test]"``.
    """
    return Metadata(
        id=PackageID(f"{md.pkg_path} [{md.pkg_path}.test]"),
        pkg_path=md.pkg_path,
        name=md.name,
        import_path=md.import_path,
        compiled_go_files=list(md.compiled_go_files) + list(extra_files),
        for_test=md.pkg_path,
        depends_on=list(md.depends_on),
    )


def new_intermediate_test_variant(md: Metadata, for_test: PackagePath) -> Metadata:
    """
    Build the ITV of md that is compiled against the test variant of
    for_test: identical files, ID ``"<pkg> [<for_test>.test]"``.
    """
    return Metadata(
        id=PackageID(f"{md.pkg_path} [{for_test}.test]"),
        pkg_path=md.pkg_path,
        name=md.name,
        import_path=md.import_path,
        compiled_go_files=list(md.compiled_go_files),
        for_test=for_test,
        depends_on=list(md.depends_on),
    )
