"""
Static UI label sets for the public pages and the menu API.
Unknown languages and missing keys fall back to English.
"""

UI_LABELS = {
    'en': {
        'dashboard': 'Dashboard',
        'add_item': 'Add New Item',
        'manage_categories': 'Manage Categories',
        'manage_menu_types': 'Manage Menu Types',
        'logout': 'Logout',
        'name': 'Name',
        'category': 'Category',
        'menu_type': 'Menu Type',
        'price': 'Price',
        'image': 'Image',
        'description': 'Description',
        'save': 'Save',
        'cancel': 'Cancel',
        'edit': 'Edit',
        'delete': 'Delete',
        'add_translation': 'Add Translation',
        'translations': 'Translations',
        'language': 'Language',
        'welcome': 'Welcome To Living Room',
        'phone': '+1 234 567 8901',
        'all': 'All',
        'indoor_menu': 'Indoor Menu',
        'outdoor_menu': 'Outdoor Menu',
        'restaurant_name': 'Living Room Restaurant',
        'your_cart': 'Your Cart',
        'cart_empty': 'Cart is empty!',
        'add_to_cart': 'Add to cart',
        'checkout': 'Order via WhatsApp',
        'new_order': 'New Order',
        'total': 'Total',
        'change_language': 'Change Language',
        'rate_us': 'Rate Us',
    },
    'ar': {
        'dashboard': 'لوحة التحكم',
        'add_item': 'إضافة عنصر جديد',
        'manage_categories': 'إدارة الفئات',
        'manage_menu_types': 'إدارة أنواع القوائم',
        'logout': 'تسجيل الخروج',
        'name': 'الاسم',
        'category': 'الفئة',
        'menu_type': 'نوع القائمة',
        'price': 'السعر',
        'image': 'الصورة',
        'description': 'الوصف',
        'save': 'حفظ',
        'cancel': 'إلغاء',
        'edit': 'تعديل',
        'delete': 'حذف',
        'add_translation': 'إضافة ترجمة',
        'translations': 'الترجمات',
        'language': 'اللغة',
        'welcome': 'مرحباً بكم في غرفة المعيشة',
        'phone': '+1 234 567 8901',
        'all': 'الكل',
        'indoor_menu': 'قائمة الطعام الداخلية',
        'outdoor_menu': 'قائمة الطعام الخارجية',
        'restaurant_name': 'مطعم الغرفة الحية',
        'your_cart': 'سلة الطلبات',
        'cart_empty': 'السلة فارغة!',
        'new_order': 'طلب جديد',
        'total': 'المجموع',
    },
    'ku': {
        'dashboard': 'پانێڵی بەڕێوەبردن',
        'add_item': 'بەگەیەکی نوێ زیاد بکە',
        'manage_categories': 'بەڕێوەبردنی پۆلەکان',
        'manage_menu_types': 'بەڕێوەبردنی جۆرەکانی لیست',
        'logout': 'چوونە دەرەوە',
        'name': 'ناو',
        'category': 'پۆل',
        'menu_type': 'جۆری لیست',
        'price': 'نرخ',
        'image': 'وێنە',
        'description': 'وەسف',
        'save': 'پاشەکەوت',
        'cancel': 'هەڵوەشاندنەوە',
        'edit': 'دەستکاری',
        'delete': 'سڕینەوە',
        'add_translation': 'وەرگێڕان زیاد بکە',
        'translations': 'وەرگێڕانەکان',
        'language': 'زمان',
        'welcome': 'بەخێربێن بۆ ژووری نیشتنەوە',
        'phone': '+1 234 567 8901',
        'all': 'هەموو',
        'indoor_menu': 'لیستی خواردنی ناوەوە',
        'outdoor_menu': 'لیستی خواردنی دەرەوە',
        'restaurant_name': 'چێشتخانەی ژووری ژیان',
        'your_cart': 'سەبەتەی داواکاری',
        'cart_empty': 'سەبەتە بەتاڵە!',
        'new_order': 'داواکاریی نوێ',
        'total': 'کۆی گشتی',
    },
}

LOCATION_LABELS = {
    'en': {
        'title': 'Where Are You?',
        'subtitle': 'Choose Your Option',
        'footer': 'Make Yourself at Home',
    },
    'ar': {
        'title': 'أين أنت الآن؟',
        'subtitle': 'اختر الخيار المناسب لك',
        'footer': 'بيتك وأعز',
    },
    'ku': {
        'title': 'لە کوێیت ئێستا؟',
        'subtitle': 'بژاردەکەت هەڵبژێرە',
        'footer': 'ماڵت و خۆش',
    },
}

RATING_LABELS = {
    'en': {
        'title': 'Rate Our Service',
        'subtitle': 'Share your experience with us',
        'service': 'Service',
        'staff': 'Staff',
        'cleanliness': 'Cleanliness',
        'overall': 'Overall Experience',
        'name': 'Name (Optional)',
        'phone': 'Phone (Optional)',
        'comment': 'Additional Comments',
        'submit': 'Submit Rating',
        'thank_you': 'Thank You!',
        'success_msg': 'Your rating has been submitted successfully',
        'error_msg': 'An error occurred, please try again',
        'back_menu': 'Back to Menu',
        'bad': 'Bad',
        'neutral': 'Neutral',
        'good': 'Excellent',
    },
    'ar': {
        'title': 'تقييم الخدمة',
        'subtitle': 'شاركنا رأيك حول تجربتك',
        'service': 'الخدمة',
        'staff': 'الموظفين',
        'cleanliness': 'النظافة',
        'overall': 'التجربة الكلية',
        'name': 'الاسم (اختياري)',
        'phone': 'رقم الهاتف (اختياري)',
        'comment': 'ملاحظات إضافية',
        'submit': 'إرسال التقييم',
        'thank_you': 'شكراً لك!',
        'success_msg': 'تم إرسال تقييمك بنجاح',
        'error_msg': 'حدث خطأ، يرجى المحاولة مرة أخرى',
        'back_menu': 'العودة للقائمة',
        'bad': 'سيء',
        'neutral': 'متوسط',
        'good': 'ممتاز',
    },
    'ku': {
        'title': 'هەڵسەنگاندنی خزمەتگوزاری',
        'subtitle': 'ئەزموونەکەت لەگەڵمان بەش بکە',
        'service': 'خزمەتگوزاری',
        'staff': 'کارمەندان',
        'cleanliness': 'پاکیژەیی',
        'overall': 'ئەزموونی گشتی',
        'name': 'ناو (ئەختیاری)',
        'phone': 'ژمارەی مۆبایل (ئەختیاری)',
        'comment': 'تێبینییە زیادەکان',
        'submit': 'ناردنی هەڵسەنگاندن',
        'thank_you': 'سوپاس!',
        'success_msg': 'هەڵسەنگاندنەکەت بە سەرکەوتوویی نێردرا',
        'error_msg': 'هەڵەیەک ڕوویدا، تکایە دووبارە هەوڵبدەرەوە',
        'back_menu': 'گەڕانەوە بۆ لیست',
        'bad': 'خراپ',
        'neutral': 'مامناوەند',
        'good': 'نایاب',
    },
}


def get_labels(language_code, table=UI_LABELS):
    labels = dict(table['en'])
    labels.update(table.get(language_code, {}))
    return labels
