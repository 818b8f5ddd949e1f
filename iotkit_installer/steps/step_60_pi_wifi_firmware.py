from __future__ import annotations

import logging

from ..context import InstallCtx
from ..options import Option

logger = logging.getLogger(__name__)


class PiWifiFirmwareStep:
    step_id = "60_pi_wifi_firmware"

    def enabled(self, ctx: InstallCtx) -> bool:
        return ctx.options[Option.FIX_PI_WIFI] and ctx.platform.is_pi

    def run(self, ctx: InstallCtx) -> bool:
        cfg = ctx.component("wifi_ap_firmware")
        marker = ctx.env.local / str(cfg.get("marker") or "firmware/wifi-ap.done")
        if marker.exists():
            logger.info("Wifi access-point firmware already fixed (%s)", marker)
            return False

        ctx.platform.install_bundle(str(cfg.get("bundle") or "wifi_ap_firmware"))
        if not ctx.dry_run:
            marker.parent.mkdir(parents=True, exist_ok=True)
            marker.write_text(f"{ctx.platform.profile_id}\n", encoding="utf-8")
        logger.info("Wifi access-point firmware fixed, a reboot is required")
        return True
