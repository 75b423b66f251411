from frappe.model.document import Document


class MollieCustomer(Document):
    pass
