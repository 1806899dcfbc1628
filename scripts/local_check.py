import subprocess
import sys
import tomllib
from pathlib import Path

FAILED: list[str] = []


def run(cmd, desc, fix=False):
    print(f"\n{'🔧' if fix else '🧪'} {desc} ...")
    try:
        subprocess.run(cmd, check=True, shell=True)
    except subprocess.CalledProcessError as e:
        print(f"⚠️  {desc} failed ({e.returncode})")
        FAILED.append(desc)


def check_toml():
    try:
        with open("pyproject.toml", "rb") as f:
            tomllib.load(f)
        print("✅ TOML syntax OK")
    except Exception as e:
        print(f"❌ TOML error: {e}")
        sys.exit(1)


def check_rules(config_path: Path = Path("config/config.yaml")):
    """Load the shipped rule set and flag condition types no evaluator handles."""
    from rulecheck.dataloader.config_loader import ConfigLoader
    from rulecheck.engine import RuleRegistry
    from rulecheck.errors import ConfigError

    print(f"\n🧪 Rule set check ({config_path}) ...")
    try:
        cfg = ConfigLoader().load(config_path)
    except ConfigError as e:
        print(f"❌ {e}")
        FAILED.append("Rule set check")
        return

    registry = RuleRegistry()
    unknown = [r.id for r in cfg.rules if r.condition.type not in registry]
    if unknown:
        print(f"⚠️  Rules with unknown condition types: {', '.join(unknown)}")
        FAILED.append("Rule set check")
    else:
        enabled = sum(1 for r in cfg.rules if r.is_enabled)
        print(f"✅ {len(cfg.rules)} rule(s), {enabled} enabled")


if __name__ == "__main__":
    check_toml()
    run("toml-sort pyproject.toml --in-place --all", "Sorting TOML", fix=True)
    run("python -m black .", "Black formatting", fix=True)
    run("ruff check .", "Ruff lint")
    run("mypy src/rulecheck", "Mypy type check")
    check_rules()
    run("python -m pytest -q", "Tests")
    if FAILED:
        print(f"\n❌ Local check finished with failures: {', '.join(FAILED)}")
        sys.exit(1)
    print("\n🏁 Local check completed.")
