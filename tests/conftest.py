"""
Shared fixtures: a small application laid out on disk.

    package.yml                                   (root, no enforcement)
    app/models/order.rb                           Order
    components/timeline/package.yml               enforces dependencies
    components/timeline/app/models/entry.rb       Entry
    components/timeline/nested/package.yml
    components/core/package.yml                   enforces privacy
    components/core/app/public/core_api.rb        CoreApi
    components/core/app/private/secret.rb         Secret
    components/sales/package.yml
    vendor/cache/gems/example/package.yml
"""

from pathlib import Path

import pytest

from packguard.configuration import Configuration


def write_file(root: Path, relative: str, content: str = "") -> Path:
    path = root / relative
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path


@pytest.fixture
def app_dir(tmp_path: Path) -> Path:
    root = tmp_path / "app_root"
    write_file(root, "package.yml", "")
    write_file(root, "app/models/order.rb", "class Order\nend\n")

    write_file(root, "components/timeline/package.yml", (
        "enforce_dependencies: true\n"
        "dependencies:\n"
        "  - components/sales\n"
    ))
    write_file(root, "components/timeline/app/models/entry.rb", (
        "class Entry\n"
        "  def secret\n"
        "    Secret.new\n"
        "  end\n"
        "\n"
        "  def api\n"
        "    CoreApi.call\n"
        "  end\n"
        "end\n"
    ))
    write_file(root, "components/timeline/nested/package.yml", "")

    write_file(root, "components/core/package.yml", (
        "enforce_privacy: true\n"
        "public_path: app/public\n"
        "visible_to: []\n"
    ))
    write_file(root, "components/core/app/public/core_api.rb", "class CoreApi\nend\n")
    write_file(root, "components/core/app/private/secret.rb", "class Secret\nend\n")

    write_file(root, "components/sales/package.yml", "")
    write_file(root, "vendor/cache/gems/example/package.yml", "")
    return root.resolve()


@pytest.fixture
def configuration(app_dir: Path) -> Configuration:
    return Configuration(root_path=app_dir, exclude=[], parallel=False)
