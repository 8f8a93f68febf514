from __future__ import annotations

ROLLING_DISTRO_NAME = "CuratedNightly"
TRAIN_DISTRO_NAME = "CuratedLTS"

ROLLING_TITLE_PREFIX = "Curated Nightly"
TRAIN_TITLE_PREFIX = "Curated LTS"

ROLLING_BUILD_DIR = "builds/nightly"
TRAIN_BUILD_DIR = "builds/lts"
LOGS_DIR = "logs"
ARTIFACT_PREFIX = "curator"

CHECK_PLAN_FILE = "check-plan.json"

TRAIN_COMMIT_MESSAGE = "Added new LTS release: {version}"
