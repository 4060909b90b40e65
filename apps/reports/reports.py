"""
Reports Module
==============

Query methods behind the dashboard, the monthly/yearly/category/vendor/
item reports and the system-wide statistics.

Classes:
    ReportQueries: Static methods, one per report.

Every report is computed from one scoped, joined queryset and reduced in
Python or by the database; nothing is fetched row by row. Purchases are
always restricted to what the acting user may see (see
``apps.accounts.policy``), and soft-deleted purchases never count.

Example:
    Monthly report for the current user::

        from apps.accounts.policy import AccessContext
        from apps.reports.reports import ReportQueries

        context = AccessContext(user=user, language='ar')
        report = ReportQueries.monthly_report(context, 2025, 1)
        print(report['title'], report['total_amount'])

Note:
    This module is read-only. All methods return plain dictionaries and
    lists, so views can hand them straight to ``Response``.
"""

from django.contrib.auth import get_user_model
from django.db.models import Count, Sum
from django.db.models.functions import ExtractMonth
from django.utils import timezone
from decimal import Decimal

from apps.accounts import policy
from apps.accounts.models import Language
from apps.catalog.models import Item, Vendor
from apps.purchases.models import Purchase
from .exceptions import InvalidReportTypeError

User = get_user_model()

ZERO = Decimal('0.00')
CENT = Decimal('0.01')
RECENT_PURCHASES_LIMIT = 10
DEFAULT_CATEGORY = 'other'

MONTH_NAMES = {
    Language.ENGLISH: [
        'January', 'February', 'March', 'April', 'May', 'June',
        'July', 'August', 'September', 'October', 'November', 'December',
    ],
    Language.ARABIC: [
        'يناير', 'فبراير', 'مارس', 'أبريل', 'مايو', 'يونيو',
        'يوليو', 'أغسطس', 'سبتمبر', 'أكتوبر', 'نوفمبر', 'ديسمبر',
    ],
}

REPORT_TITLES = {
    'monthly': {Language.ENGLISH: 'Monthly Report', Language.ARABIC: 'تقرير شهري'},
    'yearly': {Language.ENGLISH: 'Yearly Report', Language.ARABIC: 'تقرير سنوي'},
    'category': {Language.ENGLISH: 'Category Report', Language.ARABIC: 'تقرير الفئة'},
    'vendor': {Language.ENGLISH: 'Vendor Report', Language.ARABIC: 'تقرير المورد'},
    'item': {Language.ENGLISH: 'Item Report', Language.ARABIC: 'تقرير المنتج'},
}

REPORT_TYPES = list(REPORT_TITLES)

STATISTICS_LABELS = {
    'total_users': 'Total Users',
    'total_apartments': 'Total Apartments',
    'total_purchases': 'Total Purchases',
    'total_vendors': 'Total Vendors',
    'total_items': 'Total Items',
    'total_purchase_amount': 'Total Purchase Amount',
}


def _language(context):
    return context.language if context.language in MONTH_NAMES else Language.ENGLISH


def _localized(context, english, arabic):
    """Arabic name when asked for and present, English otherwise."""
    if _language(context) == Language.ARABIC and arabic:
        return arabic
    return english


def _title(context, report_type):
    return REPORT_TITLES[report_type][_language(context)]


def _period_label(context, year, month):
    return f"{MONTH_NAMES[_language(context)][month - 1]} {year}"


def _scoped_purchases(context, apartment_id=None):
    queryset = policy.scope_queryset(
        context.user,
        Purchase.objects.select_related('vendor', 'item')
    )
    if apartment_id:
        queryset = queryset.filter(apartment_id=apartment_id)
    return queryset


def _month_purchases(context, year, month, apartment_id=None):
    return _scoped_purchases(context, apartment_id).filter(
        purchased_at__year=year,
        purchased_at__month=month,
    )


def _sum(queryset, field='total_price'):
    return queryset.aggregate(total=Sum(field))['total'] or ZERO


def _average(total, count):
    if not count:
        return ZERO
    return (Decimal(total) / Decimal(count)).quantize(CENT)


def _category_totals(queryset):
    rows = queryset.values('item__category').annotate(total=Sum('total_price')).order_by('-total')
    totals = {}
    for row in rows:
        category = row['item__category'] or DEFAULT_CATEGORY
        totals[category] = totals.get(category, ZERO) + row['total']
    return totals


class ReportQueries:
    """
    Report and dashboard queries.

    Methods:
        dashboard: Current month figures for the landing page.
        monthly_report: Totals and breakdowns for one month.
        yearly_report: Month-by-month totals for one year.
        category_report: Spend per item category and item.
        vendor_report: Spend per vendor with contact details.
        item_report: Quantity and spend per item.
        system_statistics: System-wide counts (system admins).
        apartments: Apartments with user/purchase counts (system admins).

    Note:
        Report methods take an ``AccessContext``; its language selects the
        localized title, month names and vendor/item names.
    """

    @staticmethod
    def dashboard(context):
        """
        Current month summary for the acting user.

        Returns:
            dict: A dictionary containing:
                - monthly_purchases_count (int)
                - monthly_spent_amount (Decimal)
                - active_vendors_count (int)
                - active_items_count (int)
                - recent_purchases (list): Ten most recently added purchases
                - spending_by_category (dict): category -> amount this month
        """
        now = timezone.localtime()
        month_purchases = _month_purchases(context, now.year, now.month)

        recent = _scoped_purchases(context).order_by('-created_at')[:RECENT_PURCHASES_LIMIT]

        return {
            'monthly_purchases_count': month_purchases.count(),
            'monthly_spent_amount': _sum(month_purchases),
            'active_vendors_count': Vendor.objects.count(),
            'active_items_count': Item.objects.count(),
            'recent_purchases': [ReportQueries._purchase_row(context, p) for p in recent],
            'spending_by_category': _category_totals(month_purchases),
        }

    @staticmethod
    def _purchase_row(context, purchase):
        return {
            'id': str(purchase.id),
            'apartment_id': purchase.apartment_id,
            'purchased_at': purchase.purchased_at,
            'vendor': _localized(context, purchase.vendor.english_name, purchase.vendor.arabic_name),
            'item': _localized(context, purchase.item.english_name, purchase.item.arabic_name),
            'quantity': purchase.quantity,
            'unit_price': purchase.unit_price,
            'total_price': purchase.total_price,
        }

    @staticmethod
    def build(context, report_type, year, month, apartment_id=None):
        """
        Dispatch to the report method for ``report_type``.

        Raises:
            InvalidReportTypeError: If report_type is unknown
        """
        if report_type not in REPORT_TYPES:
            raise InvalidReportTypeError(
                f"Invalid report type: '{report_type}'. "
                f"Valid options: {', '.join(REPORT_TYPES)}"
            )
        if report_type == 'yearly':
            return ReportQueries.yearly_report(context, year, apartment_id)

        method = getattr(ReportQueries, f'{report_type}_report')
        return method(context, year, month, apartment_id)

    @staticmethod
    def monthly_report(context, year, month, apartment_id=None):
        """
        Totals, category and vendor breakdowns and the purchase list of a month.

        Args:
            context (AccessContext): Acting user and language.
            year (int): Report year.
            month (int): Report month (1-12).
            apartment_id (str, optional): Narrow a system admin's view to
                one apartment. Ignored for everyone else, who is already
                scoped to their own apartment.

        Returns:
            dict: title, period, total_purchases, total_amount,
            average_purchase, category_breakdown, vendor_breakdown,
            purchases.
        """
        purchases = _month_purchases(context, year, month, apartment_id).order_by('purchased_at')

        rows = list(purchases)
        total = sum((p.total_price for p in rows), ZERO)

        vendor_breakdown = {}
        for purchase in rows:
            name = _localized(context, purchase.vendor.english_name, purchase.vendor.arabic_name)
            vendor_breakdown[name] = vendor_breakdown.get(name, ZERO) + purchase.total_price

        return {
            'title': _title(context, 'monthly'),
            'period': _period_label(context, year, month),
            'total_purchases': len(rows),
            'total_amount': total,
            'average_purchase': _average(total, len(rows)),
            'category_breakdown': _category_totals(purchases),
            'vendor_breakdown': vendor_breakdown,
            'purchases': [ReportQueries._purchase_row(context, p) for p in rows],
        }

    @staticmethod
    def yearly_report(context, year, apartment_id=None):
        """
        Month-by-month totals of one year.

        ``monthly_breakdown`` always lists all twelve months (localized
        names, in calendar order), with zero for months without purchases.
        ``average_monthly`` is the yearly total divided by twelve.
        """
        purchases = _scoped_purchases(context, apartment_id).filter(purchased_at__year=year)

        by_month = dict(
            purchases
            .annotate(month=ExtractMonth('purchased_at'))
            .values('month')
            .annotate(total=Sum('total_price'))
            .values_list('month', 'total')
        )
        names = MONTH_NAMES[_language(context)]
        monthly_breakdown = {
            names[index]: by_month.get(index + 1) or ZERO
            for index in range(12)
        }
        total = sum(monthly_breakdown.values(), ZERO)

        return {
            'title': _title(context, 'yearly'),
            'period': str(year),
            'total_amount': total,
            'average_monthly': (total / 12).quantize(CENT),
            'monthly_breakdown': monthly_breakdown,
            'category_breakdown': _category_totals(purchases),
        }

    @staticmethod
    def category_report(context, year, month, apartment_id=None):
        """
        Spend per category, with a per-item breakdown inside each category.

        Returns:
            dict: title, period and ``categories``:
            ``{category: {name, total_amount, item_count, items: {item: {amount, count}}}}``
            where ``item_count`` is the number of purchases in the category.
        """
        rows = (
            _month_purchases(context, year, month, apartment_id)
            .values('item_id', 'item__category', 'item__english_name', 'item__arabic_name')
            .annotate(amount=Sum('total_price'), count=Count('id'))
            .order_by('item__category', 'item__english_name')
        )

        categories = {}
        for row in rows:
            category = row['item__category'] or DEFAULT_CATEGORY
            entry = categories.setdefault(category, {
                'name': category,
                'total_amount': ZERO,
                'item_count': 0,
                'items': {},
            })
            item_name = _localized(context, row['item__english_name'], row['item__arabic_name'])
            item = entry['items'].setdefault(item_name, {'amount': ZERO, 'count': 0})

            item['amount'] += row['amount']
            item['count'] += row['count']
            entry['total_amount'] += row['amount']
            entry['item_count'] += row['count']

        return {
            'title': _title(context, 'category'),
            'period': _period_label(context, year, month),
            'categories': categories,
        }

    @staticmethod
    def vendor_report(context, year, month, apartment_id=None):
        """
        Spend per vendor with contact details and the dated purchase amounts.

        Returns:
            dict: title, period and ``vendors`` keyed by localized vendor name.
        """
        purchases = _month_purchases(context, year, month, apartment_id).order_by('purchased_at')

        vendors = {}
        for purchase in purchases:
            vendor = purchase.vendor
            name = _localized(context, vendor.english_name, vendor.arabic_name)
            entry = vendors.setdefault(name, {
                'name': name,
                'contact_person': vendor.contact_person,
                'phone': vendor.phone,
                'email': vendor.email,
                'total_amount': ZERO,
                'purchase_count': 0,
                'purchases': [],
            })
            entry['total_amount'] += purchase.total_price
            entry['purchase_count'] += 1
            entry['purchases'].append({
                'date': purchase.purchased_at,
                'amount': purchase.total_price,
            })

        return {
            'title': _title(context, 'vendor'),
            'period': _period_label(context, year, month),
            'vendors': vendors,
        }

    @staticmethod
    def item_report(context, year, month, apartment_id=None):
        """
        Quantity and spend per item.

        ``average_price`` is ``total_amount / total_quantity``, i.e. the
        average paid per unit, not per purchase. ``unit_price`` is the
        item's current catalog price.
        """
        rows = (
            _month_purchases(context, year, month, apartment_id)
            .values(
                'item_id', 'item__english_name', 'item__arabic_name',
                'item__category', 'item__unit_price',
            )
            .annotate(
                total_quantity=Sum('quantity'),
                total_amount=Sum('total_price'),
                purchase_count=Count('id'),
            )
            .order_by('-total_amount')
        )

        items = {}
        for row in rows:
            name = _localized(context, row['item__english_name'], row['item__arabic_name'])
            items[name] = {
                'name': name,
                'category': row['item__category'] or DEFAULT_CATEGORY,
                'unit_price': row['item__unit_price'],
                'total_quantity': row['total_quantity'],
                'total_amount': row['total_amount'],
                'purchase_count': row['purchase_count'],
                'average_price': _average(row['total_amount'], row['total_quantity']),
            }

        return {
            'title': _title(context, 'item'),
            'period': _period_label(context, year, month),
            'items': items,
        }

    @staticmethod
    def system_statistics():
        """
        System-wide counts for system admins.

        Trashed purchases, vendors and items are not counted.

        Returns:
            dict: Keys of ``STATISTICS_LABELS``.
        """
        return {
            'total_users': User.objects.count(),
            'total_apartments': (
                User.objects.exclude(apartment_id='')
                .values('apartment_id').distinct().count()
            ),
            'total_purchases': Purchase.objects.count(),
            'total_vendors': Vendor.objects.count(),
            'total_items': Item.objects.count(),
            'total_purchase_amount': _sum(Purchase.objects.all()),
        }

    @staticmethod
    def statistics_rows(statistics):
        """``system_statistics`` as CSV rows with a ``Category,Count`` header."""
        rows = [['Category', 'Count']]
        for key, label in STATISTICS_LABELS.items():
            rows.append([label, statistics[key]])
        return rows

    @staticmethod
    def apartments():
        """
        Every apartment known from users or purchases, sorted by id.

        Returns:
            list[dict]: apartment_id, user_count, purchase_count, total_amount
        """
        users = dict(
            User.objects.exclude(apartment_id='')
            .values('apartment_id')
            .annotate(count=Count('id'))
            .values_list('apartment_id', 'count')
        )
        purchases = {
            row['apartment_id']: row
            for row in Purchase.objects.values('apartment_id').annotate(
                count=Count('id'),
                total=Sum('total_price'),
            )
        }

        return [
            {
                'apartment_id': apartment_id,
                'user_count': users.get(apartment_id, 0),
                'purchase_count': purchases.get(apartment_id, {}).get('count', 0),
                'total_amount': purchases.get(apartment_id, {}).get('total') or ZERO,
            }
            for apartment_id in sorted(set(users) | set(purchases))
        ]
