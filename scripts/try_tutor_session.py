# scripts/try_tutor_session.py
# Manual smoke test against the real Gemini API (needs GOOGLE_API_KEY in .env).
#
#   python -m scripts.try_tutor_session path/to/problem.png
import sys
from pathlib import Path

from src.agents.tutor_agent.agent import TutorSession
from src.tools.image_input import load_image_upload

if len(sys.argv) != 2:
    print("usage: python -m scripts.try_tutor_session <image>")
    sys.exit(2)

image_path = Path(sys.argv[1])
upload = load_image_upload(image_path.read_bytes())
print(f"Loaded {image_path.name} ({upload.mime_type}, {upload.size_bytes} bytes)")

session = TutorSession()

print("Calling start_session()... (this may take a few seconds)")
print("\nTutor:", session.start_session(upload.payload_b64, upload.mime_type))

print("\nStudent: Why did we do that?")
print("Tutor:", session.ask_for_explanation())

print("\nStudent: What's the next step?")
print("Tutor:", session.ask_for_next_step())

print("\nHistory roles:", [turn.role for turn in session.history])
