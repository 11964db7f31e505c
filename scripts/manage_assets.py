#!/usr/bin/env python3
"""
Upload or delete assets from the command line.

Reads a local file, encodes it the way the web client does (as a data URL)
and pushes it through the same AssetStorageService the API uses.

Usage:
    python scripts/manage_assets.py upload-image logo.svg [--replace OLD_KEY]
    python scripts/manage_assets.py upload-file report.pdf [--replace OLD_KEY]
    python scripts/manage_assets.py delete 20261019T142530123.png
    python scripts/manage_assets.py check "aGVsbG8="

Requires:
    - .env file (or environment) with ASSETS_BUCKET_NAME and AWS_REGION
"""

import asyncio
import base64
import mimetypes
import sys
from pathlib import Path

# Add project root to path so we can import our modules
sys.path.insert(0, str(Path(__file__).parent.parent))

from dotenv import load_dotenv

# Load environment variables
load_dotenv()


def encode_file(path: Path) -> str:
    """Encode a file as a data URL, guessing its content type from the name."""
    content_type = mimetypes.guess_type(path.name)[0] or "application/octet-stream"
    encoded = base64.b64encode(path.read_bytes()).decode("ascii")
    return f"data:{content_type};base64,{encoded}"


async def run(args) -> int:
    from asset_storage.api.dependencies import build_asset_service
    from asset_storage.config.settings import get_settings
    from asset_storage.core.assets import StorageOperationFailed
    
    settings = get_settings()
    missing = settings.validate_required_fields()
    if missing:
        print(f"ERROR: missing configuration: {', '.join(missing)}")
        return 1
    
    service = build_asset_service(settings)
    
    if args.command == "check":
        encoded = service.is_encoded_payload(args.value)
        print("encoded" if encoded else "not encoded")
        return 0 if encoded else 1
    
    try:
        if args.command == "delete":
            print(f"Deleted: {await service.delete_asset(args.key)}")
            return 0
        
        path = Path(args.path)
        if not path.is_file():
            print(f"ERROR: Cannot find {args.path}")
            return 1
        
        payload = encode_file(path)
        if args.command == "upload-image":
            url = await service.upload_image(payload, args.replace)
        else:
            url = await service.upload_file(payload, path.name, args.replace)
    except StorageOperationFailed as e:
        print(f"ERROR: {e} (progress: {e.progress.value})")
        return 1
    
    print(url)
    return 0


def main():
    import argparse
    
    parser = argparse.ArgumentParser(description='Manage stored assets')
    subparsers = parser.add_subparsers(dest='command', required=True)
    
    for name, help_text in (
        ('upload-image', 'Upload a PNG/SVG image'),
        ('upload-file', 'Upload any file, keeping its extension'),
    ):
        upload = subparsers.add_parser(name, help=help_text)
        upload.add_argument('path', help='Local file to upload')
        upload.add_argument('--replace', default='', help='Key of the asset being replaced')
    
    delete = subparsers.add_parser('delete', help='Delete an asset by key')
    delete.add_argument('key')
    
    check = subparsers.add_parser('check', help='Check whether a string is valid base64')
    check.add_argument('value')
    
    args = parser.parse_args()
    sys.exit(asyncio.run(run(args)))


if __name__ == '__main__':
    main()
