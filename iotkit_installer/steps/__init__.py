from .step_10_refresh_indexes import RefreshIndexesStep
from .step_15_upgrade_system import UpgradeSystemStep
from .step_20_system_deps import SystemDepsStep
from .step_30_core_env import CoreEnvStep
from .step_40_cloudcmd import CloudcmdStep
from .step_41_node_red import NodeRedStep
from .step_42_web_server import WebServerStep
from .step_43_mosquitto import MosquittoStep
from .step_44_convenience import ConvenienceToolsStep
from .step_50_project_template import ProjectTemplateStep
from .step_60_pi_wifi_firmware import PiWifiFirmwareStep
from .step_65_fix_bin_permissions import FixBinPermissionsStep
from .step_70_predownload_platforms import PredownloadPlatformsStep
from .step_75_fill_cache import FillCacheStep
from .step_80_build_docs import BuildDocsStep
from .step_85_serial_permissions import SerialPermissionsStep
from .step_90_persist_state import PersistStateStep
from .step_95_verify_install import VerifyInstallStep

__all__ = [
    "RefreshIndexesStep",
    "UpgradeSystemStep",
    "SystemDepsStep",
    "CoreEnvStep",
    "CloudcmdStep",
    "NodeRedStep",
    "WebServerStep",
    "MosquittoStep",
    "ConvenienceToolsStep",
    "ProjectTemplateStep",
    "PiWifiFirmwareStep",
    "FixBinPermissionsStep",
    "PredownloadPlatformsStep",
    "FillCacheStep",
    "BuildDocsStep",
    "SerialPermissionsStep",
    "PersistStateStep",
    "VerifyInstallStep",
]
