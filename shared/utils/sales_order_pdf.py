from io import BytesIO
from reportlab.lib.pagesizes import A4
from reportlab.platypus import (
    SimpleDocTemplate, Paragraph, Table, TableStyle, Spacer
)
from reportlab.lib.styles import getSampleStyleSheet
from reportlab.lib import colors


TABLE_STYLE = TableStyle([
    ("BACKGROUND", (0, 0), (-1, 0), colors.lightgrey),
    ("GRID", (0, 0), (-1, -1), 0.5, colors.grey),
    ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
    ("ALIGN", (1, 1), (-1, -1), "RIGHT"),
])


def _money(symbol: str, value) -> str:
    return f"{symbol}{float(value or 0):,.2f}"


def _header(story, styles, organization_name: str, title: str):
    story.append(Paragraph(f"<b>{organization_name}</b>", styles["Title"]))
    story.append(Paragraph(title, styles["Heading2"]))
    story.append(Spacer(1, 10))


def _render(story) -> bytes:
    buffer = BytesIO()
    doc = SimpleDocTemplate(buffer, pagesize=A4)
    doc.build(story)
    return buffer.getvalue()


def generate_sales_order_pdf(order: dict, organization_name: str, currency_symbol: str = "") -> bytes:
    styles = getSampleStyleSheet()
    story = []

    _header(story, styles, organization_name, "Sales Order")

    story.append(Paragraph(f"Order No: {order['order_code']}", styles["Normal"]))
    story.append(Paragraph(f"Client: {order.get('client_name') or ''}", styles["Normal"]))
    story.append(Paragraph(f"Warehouse: {order.get('warehouse_name') or ''}", styles["Normal"]))
    story.append(Paragraph(f"Date: {order.get('order_date') or ''}", styles["Normal"]))
    story.append(Paragraph(f"Status: {order['status']}", styles["Normal"]))
    story.append(Spacer(1, 20))

    data = [["Item", "Qty", "Unit Price", "Tax", "Line Total"]]
    for item in order["items"]:
        data.append([
            item.get("item_name") or "",
            str(item["quantity"]),
            _money(currency_symbol, item["unit_price"]),
            _money(currency_symbol, item["tax_amount"]),
            _money(currency_symbol, item["line_total"]),
        ])

    data.append(["Subtotal", "", "", "", _money(currency_symbol, order["subtotal"])])
    data.append(["Tax", "", "", "", _money(currency_symbol, order["tax_amount"])])
    data.append(["Total", "", "", "", _money(currency_symbol, order["total_amount"])])

    table = Table(data)
    table.setStyle(TABLE_STYLE)
    story.append(table)

    return _render(story)


def generate_dispatch_challan_pdf(dispatch: dict, order: dict, organization_name: str) -> bytes:
    styles = getSampleStyleSheet()
    story = []

    _header(story, styles, organization_name, "Delivery Challan")

    story.append(Paragraph(f"Dispatch No: {dispatch['dispatch_code']}", styles["Normal"]))
    story.append(Paragraph(f"Order No: {order['order_code']}", styles["Normal"]))
    story.append(Paragraph(f"Client: {order.get('client_name') or ''}", styles["Normal"]))
    story.append(Paragraph(f"Courier: {dispatch.get('courier_name') or ''}", styles["Normal"]))
    story.append(Paragraph(f"Tracking No: {dispatch.get('tracking_number') or ''}", styles["Normal"]))
    story.append(Paragraph(
        f"Vehicle: {dispatch.get('vehicle_number') or ''} "
        f"Driver: {dispatch.get('driver_name') or ''}", styles["Normal"]))
    story.append(Paragraph(f"Dispatched: {dispatch.get('dispatch_date') or ''}", styles["Normal"]))
    story.append(Spacer(1, 20))

    data = [["Item", "Quantity"]]
    for item in dispatch["items"]:
        data.append([item.get("item_name") or "", str(item["quantity"])])

    table = Table(data)
    table.setStyle(TABLE_STYLE)
    story.append(table)

    story.append(Spacer(1, 40))
    story.append(Paragraph("Receiver signature: ____________________", styles["Normal"]))

    return _render(story)
