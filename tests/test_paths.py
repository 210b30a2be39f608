"""Unit tests for drive path parsing and API route building."""

from src.drive import paths
from src.drive.models import RemoteRepoRef


class TestSplitPath:
    def test_repo_only(self):
        assert paths.split_path("hello") == ("hello", "")

    def test_nested_path(self):
        assert paths.split_path("hello/docs/guide/index.md") == ("hello", "docs/guide/index.md")

    def test_trailing_separator_dropped(self):
        assert paths.split_path("hello/docs/") == ("hello", "docs")

    def test_resolve_builds_repo_ref(self):
        assert paths.resolve("octocat", "hello/a.txt") == RemoteRepoRef("octocat", "hello", "a.txt")


class TestRoutes:
    def test_contents_route(self):
        assert paths.contents_route("octocat", "hello", "src/main.py") == "repos/octocat/hello/contents/src/main.py"

    def test_contents_route_repo_root(self):
        assert paths.contents_route("octocat", "hello", "") == "repos/octocat/hello/contents"

    def test_segments_are_encoded_individually(self):
        route = paths.contents_route("octocat", "hello", "my docs/a#b?.md")
        assert route == "repos/octocat/hello/contents/my%20docs/a%23b%3F.md"

    def test_encode_keeps_uri_component_safe_chars(self):
        assert paths.encode_parts("a(b)/c!d~e*f'g") == "a(b)/c!d~e*f'g"

    def test_repos_route(self):
        assert paths.repos_route("octo cat") == "users/octo%20cat/repos"

    def test_blob_route(self):
        assert paths.blob_route("octocat", "hello", "abc123") == "repos/octocat/hello/git/blobs/abc123"


class TestParentDir:
    def test_top_level_file(self):
        assert paths.parent_dir("bigfile.bin") == ""

    def test_nested_file(self):
        assert paths.parent_dir("data/raw/bigfile.bin") == "data/raw"

    def test_url_join_skips_empty_and_dot(self):
        assert paths.url_join("repos", "", "a", ".", "b/") == "repos/a/b"
