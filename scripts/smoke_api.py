from __future__ import annotations

import argparse
import json
import mimetypes
from pathlib import Path

import httpx


def _mime_type_for(path: Path) -> str:
    if path.suffix.lower() == ".docx":
        return "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
    guessed, _ = mimetypes.guess_type(path.name)
    return guessed or "text/plain"


def main() -> None:
    parser = argparse.ArgumentParser(description="Send a resume and job posting to a running API and print the result.")
    parser.add_argument("--base-url", default="http://localhost:8000", help="API base URL")
    parser.add_argument("--resume", default="test-resume.txt", help="Resume file (.txt or .docx)")
    parser.add_argument("--job", default="test-job.txt", help="Job posting text file")
    parser.add_argument("--job-url", default=None, help="Scrape the job posting from this URL instead of --job")
    parser.add_argument("--insights", action="store_true", help="Also request insights for the analysis.")
    parser.add_argument("--api-key", default=None, help="X-API-Key for the cache stats call")
    args = parser.parse_args()

    resume_path = Path(args.resume)
    base_url = args.base_url.rstrip("/")

    with httpx.Client(timeout=120.0) as client:
        if args.job_url:
            scraped = client.post(f"{base_url}/v1/scrape", json={"url": args.job_url})
            scraped.raise_for_status()
            scrape_body = scraped.json()
            print(f"Scraped job posting (fromCache={scrape_body['fromCache']}, hash={scrape_body['urlHash'][:12]})")
            job_posting = scrape_body["jobPosting"]
        else:
            job_posting = Path(args.job).read_text(encoding="utf-8")

        response = client.post(
            f"{base_url}/v1/analyze",
            files={"resume": (resume_path.name, resume_path.read_bytes(), _mime_type_for(resume_path))},
            data={"jobPosting": job_posting},
        )
        if response.status_code >= 400:
            raise SystemExit(f"API request failed ({response.status_code}): {response.text}")
        result = response.json()
        print("Analysis Result:", json.dumps(result, indent=2))

        if args.insights and "jobAnalysis" in result:
            insights = client.post(f"{base_url}/v1/insights", json={"jobAnalysis": result["jobAnalysis"]})
            insights.raise_for_status()
            print("Insights:", json.dumps(insights.json(), indent=2, ensure_ascii=False))

        headers = {"X-API-Key": args.api_key} if args.api_key else {}
        stats = client.get(f"{base_url}/v1/cache/stats", headers=headers)
        if stats.status_code < 400:
            print("Cache stats:", json.dumps(stats.json(), indent=2))


if __name__ == "__main__":
    main()
