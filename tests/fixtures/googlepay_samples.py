#!/usr/bin/env python3
"""
Synthetic Google Pay Takeout payloads.

All names, IDs and amounts are synthetic.
"""

from tests.fixtures.archives import build_encrypted_zip, build_zip

TRANSACTIONS_PATH = "Takeout/Google Pay/Google transactions/transactions_123456789.csv"
GROUP_EXPENSES_PATH = "Takeout/Google Pay/Group expenses/Group expenses.json"
CASHBACK_PATH = "Takeout/Google Pay/Rewards earned/Cashback rewards.csv"
VOUCHERS_PATH = "Takeout/Google Pay/Rewards earned/Voucher rewards.json"
MY_ACTIVITY_PATH = "Takeout/Google Pay/My Activity/My Activity.html"

TRANSACTIONS_CSV = """Time,Transaction ID,Description,Product,Payment method,Status,Amount
"9 Mar 2024, 18:51",GPAY-0001,Paid to Swiggy,Google Pay,State Bank of India ••1234,Completed,₹250.00
"2 Jan 2024, 09:15",GPAY-0002,Paid to Uber India,Google Pay,State Bank of India ••1234,Completed,"₹1,180.50"
"15 Dec 2023, 20:00",GPAY-0003,Google Play purchase,Google Play,Visa ••9876,Completed,USD 2.99
"9 Mar 2024, 18:51",GPAY-0001,Paid to Swiggy,Google Pay,State Bank of India ••1234,Completed,₹250.00
"""

TRANSACTIONS_CSV_WITH_BAD_ROWS = """Time,Transaction ID,Description,Product,Payment method,Status,Amount
"9 Mar 2024, 18:51",GPAY-0001,Paid to Swiggy,Google Pay,State Bank of India ••1234,Completed,₹250.00
not a date,GPAY-0004,Paid to Zomato,Google Pay,State Bank of India ••1234,Completed,₹99.00
"10 Mar 2024, 10:00",GPAY-0005,Paid to BigBasket,Google Pay,State Bank of India ••1234,Completed,
"11 Mar 2024, 11:00",GPAY-0006,Paid to BigBasket,Google Pay,State Bank of India ••1234,Completed,₹abc
"12 Mar 2024, 12:00",GPAY-0007,Paid to Apollo Pharmacy,Google Pay,State Bank of India ••1234,Completed,₹410.00
"""

CASHBACK_CSV = """Date,Currency,Amount,Description
2024-03-10,INR,25.00,Scratch card reward
2023-11-02,INR,10.50,Cashback on bill payment
"""

GROUP_EXPENSES_JSON = """{
  "Group_expenses": [
    {
      "creation_time": "2024-02-14T19:30:00+05:30",
      "creator": "Asha",
      "group_name": "Goa Trip",
      "total_amount": "₹3,000.00",
      "state": "ONGOING",
      "title": "Dinner",
      "items": [
        {"amount": "₹1,500.00", "state": "PAID_RECEIVED", "payer": "Asha"},
        {"amount": "₹1,500.00", "state": "UNPAID", "payer": "Ravi"}
      ]
    },
    {
      "creation_time": 1672574400000,
      "creator": "Ravi",
      "group_name": "Flat",
      "total_amount": "1200",
      "state": "COMPLETED",
      "title": "Internet bill",
      "items": []
    },
    {
      "creator": "Nobody",
      "total_amount": "₹10.00",
      "state": "ONGOING"
    }
  ]
}
"""

VOUCHERS_JSON = """{
  "Vouchers": [
    {
      "code": "SAVE50",
      "details": "Flat ₹50 off on recharge",
      "summary": "Recharge voucher",
      "expiry_date": "2024-12-31T10:00:00Z"
    },
    {
      "code": "FOOD20",
      "details": "20% off food delivery",
      "summary": "Food voucher",
      "expiry_date": "2025-01-15T00:00:00+05:30"
    }
  ]
}
"""

VOUCHERS_JSON_WITH_XSSI = ")]}'\n" + VOUCHERS_JSON


def _activity_block(action: str, timestamp: str, products: str = "Google Pay") -> str:
    return f"""
<div class="outer-cell mdl-cell mdl-cell--12-col mdl-shadow--2dp">
  <div class="mdl-grid">
    <div class="header-cell mdl-cell mdl-cell--12-col"><p class="mdl-typography--title">Google Pay<br></p></div>
    <div class="content-cell mdl-cell mdl-cell--6-col mdl-typography--body-1">{action}<br>{timestamp}<br></div>
    <div class="content-cell mdl-cell mdl-cell--6-col mdl-typography--body-1 mdl-typography--text-right"></div>
    <div class="content-cell mdl-cell mdl-cell--12-col mdl-typography--caption"><b>Products:</b><br>&emsp;{products}<br><b>Details:</b><br>&emsp;Completed<br></div>
  </div>
</div>"""


MY_ACTIVITY_HTML = (
    "<html><head><title>My Activity</title></head><body><div class=\"mdl-grid\">"
    + _activity_block("Paid ₹250.00 to Swiggy using Bank Account XXXX1234", "Mar 9, 2024, 6:51:23 PM IST")
    + _activity_block("Received ₹500.00 from Ravi Kumar", "Feb 1, 2024, 10:05:00 AM IST")
    + _activity_block("Sent ₹1,200.00 to Irctc using Bank Account XXXX1234", "Jan 20, 2024, 7:30:00 AM IST")
    + _activity_block("Requested ₹300.00 from Asha", "Jan 5, 2024, 9:00:00 PM IST")
    + _activity_block("Used Google Pay", "Dec 31, 2023, 11:59:00 PM IST")
    + _activity_block("Paid ₹99.00 to Zomato", "no timestamp here")
    + "</div></body></html>"
)


def takeout_members(include: tuple[str, ...] | None = None) -> dict[str, str]:
    """Full Takeout member map, optionally restricted to some roles."""
    members = {
        "transactions": (TRANSACTIONS_PATH, TRANSACTIONS_CSV),
        "group_expenses": (GROUP_EXPENSES_PATH, GROUP_EXPENSES_JSON),
        "cashback_rewards": (CASHBACK_PATH, CASHBACK_CSV),
        "voucher_rewards": (VOUCHERS_PATH, VOUCHERS_JSON_WITH_XSSI),
        "activity_log": (MY_ACTIVITY_PATH, MY_ACTIVITY_HTML),
    }
    selected = include or tuple(members)
    result = {path: content for role, (path, content) in members.items() if role in selected}
    result["Takeout/archive_browser.html"] = "<html><body>Archive browser</body></html>"
    return result


def build_takeout_zip(include: tuple[str, ...] | None = None) -> bytes:
    """Build an in-memory Takeout archive."""
    return build_zip(takeout_members(include))


def build_encrypted_takeout_zip(password: str, include: tuple[str, ...] | None = None) -> bytes:
    """Build a password-protected Takeout archive."""
    return build_encrypted_zip(takeout_members(include), password)
