import argparse
import json
import sys

from app.core.config import get_settings
from app.core.logging_config import setup_logging
from app.services.bandplan import band_for_frequency, mode_for_frequency
from app.services.deeplink import build_suggested_qso, parse_link_url


def _no_lookup(hz):
    return None


def main(argv=None):
    settings = get_settings()
    ap = argparse.ArgumentParser("polo-deeplink", description="parse a deep link and print the suggested QSO")
    ap.add_argument("url", help="e.g. com.ham2k.polo://qso?theirRef=K-1234&theirSig=pota")
    ap.add_argument("--scheme", default=settings.url_scheme)
    ap.add_argument("--no-bandplan", action="store_true", help="do not derive band/mode from freq")
    ap.add_argument("--indent", type=int, default=2)
    ap.add_argument("--log-level", default=settings.log_level)

    args = ap.parse_args(argv)
    setup_logging(args.log_level)

    params = parse_link_url(args.url, args.scheme)
    if params is None:
        print(f"Not a valid deep link: {args.url}", file=sys.stderr)
        return 2

    lookups = (_no_lookup, _no_lookup) if args.no_bandplan else (band_for_frequency, mode_for_frequency)
    qso = build_suggested_qso(params, *lookups)
    print(json.dumps({"params": params.to_dict(), "qso": qso.to_dict()}, indent=args.indent))
    return 0


if __name__ == "__main__":
    sys.exit(main())
