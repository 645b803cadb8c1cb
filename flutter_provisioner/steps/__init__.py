from .step_10_detect_distro import DetectDistroStep
from .step_20_update_system import UpdateSystemStep
from .step_30_install_packages import InstallPackagesStep
from .step_40_install_waydroid import InstallWaydroidStep
from .step_50_install_flutter import InstallFlutterStep
from .step_60_fetch_sdk import FetchSdkStep
from .step_70_write_env import WriteEnvStep
from .step_80_device_permissions import DevicePermissionsStep
from .step_90_verify import VerifyStep

__all__ = [
    "DetectDistroStep",
    "UpdateSystemStep",
    "InstallPackagesStep",
    "InstallWaydroidStep",
    "InstallFlutterStep",
    "FetchSdkStep",
    "WriteEnvStep",
    "DevicePermissionsStep",
    "VerifyStep",
]
