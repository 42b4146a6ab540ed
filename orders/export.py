import openpyxl
from django.http import HttpResponse
from django.utils import timezone
from openpyxl.styles import Font


def export_orders_excel(orders, title='Orders Report'):
    """Generate Excel report for a list of orders"""
    wb = openpyxl.Workbook()
    ws = wb.active
    ws.title = "Orders"

    header_font = Font(bold=True, size=12)
    title_font = Font(bold=True, size=16)

    ws['A1'] = title
    ws['A1'].font = title_font
    ws['A2'] = f"Generated: {timezone.localtime().strftime('%Y-%m-%d %H:%M')}"
    ws.merge_cells('A1:J1')
    ws.merge_cells('A2:J2')

    headers = [
        'Order ID', 'Date', 'Customer', 'Phone', 'Address',
        'Order Type', 'Items', 'Notes', 'Status', 'Total Amount'
    ]
    for col, header in enumerate(headers, 1):
        cell = ws.cell(row=4, column=col, value=header)
        cell.font = header_font

    row = 5
    total = 0
    for order in orders:
        ws.cell(row=row, column=1, value=order.id)
        ws.cell(row=row, column=2, value=timezone.localtime(order.created_at).strftime('%Y-%m-%d %H:%M'))
        ws.cell(row=row, column=3, value=order.customer_name)
        ws.cell(row=row, column=4, value=order.customer_phone)
        ws.cell(row=row, column=5, value=order.customer_address)
        ws.cell(row=row, column=6, value=order.get_order_type_display())
        ws.cell(row=row, column=7, value=order.items_summary())
        ws.cell(row=row, column=8, value=order.notes)
        ws.cell(row=row, column=9, value=order.get_status_display())
        ws.cell(row=row, column=10, value=float(order.total_amount))
        if order.status != 'cancelled':
            total += float(order.total_amount)
        row += 1

    row += 1
    ws.cell(row=row, column=9, value="TOTAL:").font = header_font
    ws.cell(row=row, column=10, value=total).font = header_font

    # Auto-adjust column widths
    for column in ws.iter_cols(min_row=4, max_row=ws.max_row):
        max_length = max((len(str(cell.value)) for cell in column if cell.value is not None), default=0)
        ws.column_dimensions[column[0].column_letter].width = min(max_length + 2, 50)

    response = HttpResponse(content_type='application/vnd.openxmlformats-officedocument.spreadsheetml.sheet')
    response['Content-Disposition'] = f'attachment; filename="orders_{timezone.localdate():%Y%m%d}.xlsx"'
    wb.save(response)
    return response
