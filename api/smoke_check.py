"""
Smoke check for a running Statement Extractor API
Usage: python api/smoke_check.py [statement.pdf ...]
"""

import requests
import json
import sys
from pathlib import Path

BASE_URL = "http://localhost:5001"

SAMPLE_TEXT = """ACCOUNT ACTIVITY
03/01/2023 PAYROLL DEPOSIT ACME $2,500.00
03/05/2023 DEBIT CORNER MARKET $54.20
03/09/2023 WITHDRAWAL ATM $100.00
ACCOUNT SUMMARY
"""


def check_health():
    print("\n1. Health check...")
    response = requests.get(f"{BASE_URL}/health")
    print(f"Status Code: {response.status_code}")
    print(f"Response: {response.json()}")
    return response.status_code == 200


def check_extract_text():
    print("\n2. Extracting from sample text...")
    response = requests.post(f"{BASE_URL}/api/transactions/extract", json={"text": SAMPLE_TEXT})
    print(f"Status Code: {response.status_code}")
    result = response.json()
    print(json.dumps(result, indent=2))
    return result.get("transactions", [])


def check_upload(pdf_path):
    print(f"\n3. Uploading {pdf_path}...")
    with open(pdf_path, 'rb') as pdf_file:
        files = {'pdfFile': (Path(pdf_path).name, pdf_file, 'application/pdf')}
        response = requests.post(f"{BASE_URL}/api/upload/bank-statement", files=files)
    print(f"Status Code: {response.status_code}")
    result = response.json()
    if response.status_code != 200:
        print(f"Error: {result.get('detail')}")
        return []
    print(f"Transactions: {len(result['transactions'])}")
    return result['transactions']


def check_dashboard(transactions):
    print("\n4. Dashboard summary...")
    response = requests.post(f"{BASE_URL}/api/dashboard", json={"transactions": transactions})
    print(f"Status Code: {response.status_code}")
    print(json.dumps(response.json()["summary"], indent=2))
    return response.status_code == 200


def check_report(transactions):
    print("\n5. Generating report...")
    response = requests.post(f"{BASE_URL}/api/reports", json={"transactions": transactions})
    print(f"Status Code: {response.status_code}")
    if response.status_code != 200:
        return False
    download_url = response.json()["report"]["download_url"]
    download = requests.get(f"{BASE_URL}{download_url}")
    print(f"Downloaded {len(download.content)} bytes from {download_url}")
    return download.status_code == 200


def main():
    print("=" * 60)
    print("Statement Extractor API - Smoke Check")
    print("=" * 60)

    results = [check_health()]

    transactions = check_extract_text()
    results.append(bool(transactions))

    for pdf_path in sys.argv[1:]:
        if not Path(pdf_path).exists():
            print(f"File not found: {pdf_path}")
            results.append(False)
            continue
        transactions.extend(check_upload(pdf_path))

    results.append(check_dashboard(transactions))
    results.append(check_report(transactions))

    print("\n" + "=" * 60)
    print(f"Checks passed: {sum(results)}/{len(results)}")
    print("=" * 60)
    return 0 if all(results) else 1


if __name__ == "__main__":
    sys.exit(main())
