"""Menu, permission and route tables shared by the navdeck tests."""

MENU = [
    {'key': '1', 'label': 'Dashboard', 'path': '/dashboard'},
    {'key': '4', 'label': 'Goods', 'children': [
        {'key': '4-1', 'label': 'Overview', 'path': '/goods/overview'},
        {'key': '4-3', 'label': 'Manage', 'path': '/goods/manage'},
        {'key': '4-4', 'label': 'Stock', 'path': '/goods/stock'},
    ]},
    {'key': '6', 'label': 'Marketing', 'children': [
        {'key': '6-1', 'label': 'Benefits', 'children': [
            {'key': '6-1-1', 'label': 'Coupons', 'path': '/coupon/manage'},
            {'key': '6-1-2', 'label': 'Vouchers', 'path': '/coupon/cash'},
        ]},
        {'key': '6-2', 'label': 'Flash sale', 'path': '/marketing/seckill'},
    ]},
    {'key': '8', 'label': 'Users', 'children': [
        {'key': '8-1', 'label': 'Clients', 'path': '/user/client'},
        {'key': '8-2', 'label': 'Back office', 'children': [
            {'key': '8-2-1', 'label': 'User list', 'path': '/user/admin/list'},
            {'key': '8-2-2', 'label': 'Permissions', 'path': '/user/admin/permission'},
        ]},
    ]},
]

PERMISSIONS = {
    '/': ['admin', 'editor'],
    '/dashboard': ['admin', 'editor'],
    '/goods/*': ['admin', 'editor'],
    '/coupon/*': ['admin'],
    '/user/*': ['admin'],
}

ROUTE_NAMES = {
    '/': 'Home',
    '/dashboard': 'Dashboard',
    '/goods/overview': 'Goods overview',
    '/goods/manage': 'Goods',
    '/goods/stock': 'Stock',
    '/coupon/manage': 'Coupons',
    '/coupon/cash': 'Vouchers',
    '/user/client': 'Clients',
    '/user/admin/list': 'User list',
    '/user/admin/permission': 'Permissions',
    '/a': 'A',
    '/b': 'B',
}
