import asyncio
import base64
import mimetypes
import os
import sys
from io import BytesIO

from starlette.datastructures import Headers, UploadFile

from aria_relay.pipelines.transform import process_transform
from aria_relay.services import get_persona_rewriter, get_transcribe_service, get_voice_tts_service


async def main():
    if len(sys.argv) < 3:
        print("Usage: python scripts/try_transform.py path/to/audio.webm persona_id [accent]")
        return

    file_path, persona_id = sys.argv[1], sys.argv[2]
    accent = sys.argv[3] if len(sys.argv) > 3 else "american"

    if not os.path.exists(file_path):
        print(f"File '{file_path}' not found.")
        return

    with open(file_path, "rb") as f:
        audio_bytes = f.read()

    content_type = mimetypes.guess_type(file_path)[0] or "audio/webm"
    upload = UploadFile(
        file=BytesIO(audio_bytes),
        filename=os.path.basename(file_path),
        headers=Headers({"content-type": content_type}),
    )
    form = {"audio": upload, "personaId": persona_id, "accent": accent}

    print(f"Transforming {len(audio_bytes)} bytes as {persona_id} ({accent})...")
    rewriter = get_persona_rewriter() if os.getenv("REWRITE_ENABLED") else None
    outcome = await process_transform(form, get_transcribe_service(), get_voice_tts_service(), rewriter)
    payload = outcome.result.to_payload()

    if "error" in payload:
        print(f"\nHTTP {outcome.status_code}: {payload['error']}")
        return

    out_path = f"{persona_id}_{accent}.mp3"
    with open(out_path, "wb") as f:
        f.write(base64.b64decode(payload["audioBase64"]))

    print("\n--- Transcript ---")
    print(payload["transcript"])
    print("------------------")
    print(f"Audio written to {out_path}")


if __name__ == "__main__":
    asyncio.run(main())
