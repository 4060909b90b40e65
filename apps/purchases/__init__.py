"""
Purchases App - Apartment Purchase Records

Tracks what each apartment bought, from which vendor, at what price.

Key Features:
- Purchase creation with server-computed totals
- Apartment-scoped listing and filtering
- Soft delete into the shared trash

Architecture:
- Models: Purchase
- Services: PurchaseService (create, update, soft delete)
- Views: PurchaseViewSet
- Permissions: IsApartmentMemberForPurchase, CanManagePurchase
"""
